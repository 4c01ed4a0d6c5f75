import json
import os
import platform
import stat

import pytest

from credvault import config
from credvault.errors import CorruptRecordError
from credvault.lockout import LockoutState
from credvault.storage import CredentialEntry, MasterCredentialRecord, RecordStore


class TestEntries:
    def test_missing_list_is_empty(self, store):
        assert store.load_entries() == []

    def test_save_and_load_keeps_order(self, store):
        entries = [
            CredentialEntry(id="1", service="a", username="u", secret="s"),
            CredentialEntry(id="2", service="b", username="v", secret="t"),
        ]
        store.save_entries(entries)
        assert store.load_entries() == entries

    def test_corrupt_list_raises(self, store):
        os.makedirs(store.directory, exist_ok=True)
        with open(os.path.join(store.directory, config.ENTRIES_FILE), "w") as f:
            f.write("{not json")
        with pytest.raises(CorruptRecordError):
            store.load_entries()

    def test_written_as_json_array(self, store):
        store.save_entries([CredentialEntry(id="1", service="a", username="u", secret="s")])
        with open(os.path.join(store.directory, config.ENTRIES_FILE)) as f:
            assert json.load(f) == [{"id": "1", "service": "a", "username": "u", "secret": "s"}]

    @pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
    def test_owner_only_permissions(self, store):
        store.save_entries([])
        mode = os.stat(os.path.join(store.directory, config.ENTRIES_FILE)).st_mode
        assert stat.S_IMODE(mode) == 0o600
        assert not os.path.exists(os.path.join(store.directory, config.ENTRIES_FILE + ".tmp"))


class TestMasterRecord:
    def test_absent_before_setup(self, store):
        assert store.load_master_record() is None

    def test_replaced_wholesale(self, store):
        store.save_master_record(MasterCredentialRecord(hash="aa", salt="bb"))
        store.save_master_record(MasterCredentialRecord(hash="cc", salt="dd"))
        assert store.load_master_record() == MasterCredentialRecord(hash="cc", salt="dd")

    def test_missing_field_raises(self, store):
        os.makedirs(store.directory, exist_ok=True)
        with open(os.path.join(store.directory, config.MASTER_RECORD_FILE), "w") as f:
            json.dump({"hash": "aa"}, f)
        with pytest.raises(CorruptRecordError):
            store.load_master_record()


class TestLockoutRecord:
    def test_defaults_to_initial_state(self, store):
        assert store.load_lockout_state() == LockoutState()

    def test_round_trip(self, store):
        state = LockoutState(failed_attempts=3, locked_until=1_700_000_300.5, lock_cycle=2)
        store.save_lockout_state(state)
        assert store.load_lockout_state() == state

    def test_corrupt_falls_back_to_initial(self, store):
        os.makedirs(store.directory, exist_ok=True)
        with open(os.path.join(store.directory, config.LOCKOUT_FILE), "w") as f:
            f.write("garbage")
        assert store.load_lockout_state() == LockoutState()


def test_clear_all(store):
    store.save_entries([CredentialEntry(id="1", service="a", username="u", secret="s")])
    store.save_master_record(MasterCredentialRecord(hash="aa", salt="bb"))
    store.save_lockout_state(LockoutState(lock_cycle=3))
    store.clear_all()
    assert store.load_entries() == []
    assert store.load_master_record() is None
    assert store.load_lockout_state() == LockoutState()


def test_default_directory(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert RecordStore().directory == os.path.join(str(tmp_path), config.CONFIG_DIR_NAME)
