"""
Unit Tests for Security Module
Tests for: password hashing, legacy plaintext passwords, session/correlation ids
"""
import hmac
import re

from soc_portal.core.security import (
    verify_password,
    get_password_hash,
    is_password_hashed,
    check_password,
    generate_session_id,
    generate_eid,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert is_password_hashed(hashed)

    def test_hash_password_different_each_time(self):
        """Test that hashing same password returns different hashes"""
        password = "testpassword123"

        # Bcrypt generates different salts
        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_verify_against_non_hash_is_false(self):
        """A plaintext stored value never verifies as bcrypt"""
        assert verify_password("secret", "secret") is False

    def test_hash_long_password_truncated(self):
        """Test that long passwords are truncated to bcrypt limit"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True


class TestLegacyPasswords:
    """Rows created before hashing store the password as plaintext"""

    def test_is_password_hashed_prefixes(self):
        assert is_password_hashed("$2b$04$abcdefghijklmnopqrstuv")
        assert is_password_hashed("$2a$10$abcdefghijklmnopqrstuv")
        assert is_password_hashed("$2y$10$abcdefghijklmnopqrstuv")
        assert not is_password_hashed("Password123")
        assert not is_password_hashed("")

    def test_check_password_plaintext(self):
        assert check_password("Password123", "Password123") is True
        assert check_password("password123", "Password123") is False

    def test_check_password_hashed(self):
        hashed = get_password_hash("Password123")
        assert check_password("Password123", hashed) is True
        assert check_password("Password124", hashed) is False

    def test_check_password_plaintext_constant_time(self, monkeypatch):
        calls = []
        real_compare = hmac.compare_digest

        def recording_compare(a, b):
            calls.append((a, b))
            return real_compare(a, b)

        monkeypatch.setattr(hmac, "compare_digest", recording_compare)

        assert check_password("Pässword1", "Pässword1") is True
        assert calls == [("Pässword1".encode("utf-8"), "Pässword1".encode("utf-8"))]

    def test_check_password_empty_store(self):
        assert check_password("", "") is False


class TestIdentifiers:

    def test_session_ids_unique(self):
        ids = {generate_session_id() for _ in range(50)}
        assert len(ids) == 50

    def test_eid_format(self):
        assert re.fullmatch(r"SOC-\d{6}", generate_eid())
