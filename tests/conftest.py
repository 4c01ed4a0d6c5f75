import pytest

from credvault.crypto import CredentialGuard
from credvault.lockout import LockoutPolicy
from credvault.session import VaultSession
from credvault.storage import RecordStore

STRONG_PASSPHRASE = "Correct#Horse9"


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def guard():
    # Minimal Argon2id cost so the suite stays fast
    return CredentialGuard(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return RecordStore(str(tmp_path / "vault"))


@pytest.fixture
def session(store, guard, clock):
    return VaultSession(store, guard=guard, policy=LockoutPolicy(), clock=clock)


@pytest.fixture
def unlocked_session(session):
    session.setup(STRONG_PASSPHRASE, STRONG_PASSPHRASE)
    assert session.unlock(STRONG_PASSPHRASE).accepted
    return session


@pytest.fixture
def master_passphrase():
    return STRONG_PASSPHRASE
