import re

import pytest

from credvault.errors import InvalidArgumentError
from credvault.secure_random import SecureRandom


@pytest.fixture
def rng():
    return SecureRandom()


class TestSecureRandom:
    def test_random_bytes_length(self, rng):
        assert len(rng.random_bytes(32)) == 32
        assert rng.random_bytes(32) != rng.random_bytes(32)

    def test_random_int_bounds(self, rng):
        values = {rng.random_int(3, 6) for _ in range(200)}
        assert values == {3, 4, 5}

    def test_random_int_empty_range(self, rng):
        with pytest.raises(InvalidArgumentError):
            rng.random_int(5, 5)

    def test_shuffle_is_permutation(self, rng):
        items = list(range(20))
        rng.shuffle(items)
        assert sorted(items) == list(range(20))

    def test_choice_empty(self, rng):
        with pytest.raises(InvalidArgumentError):
            rng.choice("")

    def test_generate_id_format(self, rng):
        assert re.fullmatch(r"\d+-[0-9a-z]{9}", rng.generate_id())

    def test_ids_unique(self, rng):
        ids = {rng.generate_id() for _ in range(500)}
        assert len(ids) == 500

    def test_file_tag_is_six_digits(self, rng):
        assert re.fullmatch(r"[1-9]\d{5}", rng.generate_file_tag())
