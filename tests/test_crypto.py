"""
Tests for CredentialGuard: master passphrase hashing, verification and strength rules.
"""

import pytest

from credvault import config
from credvault.crypto import CredentialGuard
from credvault.errors import InvalidArgumentError


class TestHashAndVerify:
    def test_verify_accepts_same_passphrase(self, guard):
        hash_hex, salt_hex = guard.hash_passphrase("Secret#Pass1")
        assert guard.verify("Secret#Pass1", hash_hex, salt_hex) is True

    def test_verify_rejects_other_passphrase(self, guard):
        hash_hex, salt_hex = guard.hash_passphrase("Secret#Pass1")
        assert guard.verify("Secret#Pass2", hash_hex, salt_hex) is False

    def test_hash_and_salt_are_hex_of_configured_size(self, guard):
        hash_hex, salt_hex = guard.hash_passphrase("Secret#Pass1")
        assert len(bytes.fromhex(hash_hex)) == config.HASH_SIZE
        assert len(bytes.fromhex(salt_hex)) == config.SALT_SIZE

    def test_same_passphrase_gets_fresh_salt(self, guard):
        first = guard.hash_passphrase("Secret#Pass1")
        second = guard.hash_passphrase("Secret#Pass1")
        assert first[1] != second[1]
        assert first[0] != second[0]

    def test_different_passphrases_hash_differently(self, guard):
        assert guard.hash_passphrase("Secret#Pass1")[0] != guard.hash_passphrase("Secret#Pass2")[0]

    def test_derivation_is_deterministic_for_fixed_salt(self, guard):
        salt = bytes(range(config.SALT_SIZE))
        assert guard.derive("Secret#Pass1", salt) == guard.derive("Secret#Pass1", salt)

    def test_corrupt_record_is_rejected(self, guard):
        assert guard.verify("Secret#Pass1", "not-hex", "zz") is False

    def test_pbkdf2_backend(self):
        pbkdf2 = CredentialGuard(algorithm="pbkdf2", iterations=1000)
        hash_hex, salt_hex = pbkdf2.hash_passphrase("Secret#Pass1")
        assert pbkdf2.verify("Secret#Pass1", hash_hex, salt_hex)
        assert not pbkdf2.verify("secret#Pass1", hash_hex, salt_hex)

    def test_unknown_algorithm(self):
        with pytest.raises(InvalidArgumentError):
            CredentialGuard(algorithm="md5")


class TestValidateStrength:
    def test_strong_passphrase(self):
        result = CredentialGuard.validate_strength("Abcdef1!")
        assert result.valid is True

    @pytest.mark.parametrize("passphrase, fragment", [
        ("Ab1!", "at least 8 characters"),
        ("abcdefg1!", "uppercase"),
        ("Abcdefgh!", "digit"),
        ("Abcdefgh1", "special character"),
    ])
    def test_each_rule_has_its_own_reason(self, passphrase, fragment):
        result = CredentialGuard.validate_strength(passphrase)
        assert result.valid is False
        assert fragment in result.reason

    def test_first_violated_rule_wins(self):
        # Too short, no uppercase, no digit, no symbol: only length is reported
        result = CredentialGuard.validate_strength("abc")
        assert "at least 8 characters" in result.reason

    def test_uppercase_checked_before_digit(self):
        result = CredentialGuard.validate_strength("abcdefgh")
        assert "uppercase" in result.reason

    def test_symbol_outside_set_does_not_count(self):
        result = CredentialGuard.validate_strength("Abcdefg1~")
        assert result.valid is False
        assert "special character" in result.reason
