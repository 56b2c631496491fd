"""
Unit tests for Argon2PasswordHasher.
"""

from conftest import fast_hasher


class TestArgon2PasswordHasher:
    """Unit tests for Argon2PasswordHasher."""

    async def test_hash_and_verify(self):
        """Test correct password verifies and hash hides the password."""
        hasher = fast_hasher()

        password_hash = await hasher.hash("secret123")

        assert password_hash.startswith("$argon2")
        assert "secret123" not in password_hash
        assert await hasher.verify("secret123", password_hash) is True

    async def test_wrong_password(self):
        """Test wrong password fails verification."""
        hasher = fast_hasher()
        password_hash = await hasher.hash("secret123")

        assert await hasher.verify("secret124", password_hash) is False

    async def test_garbage_hash(self):
        """Test a malformed stored hash fails verification instead of raising."""
        hasher = fast_hasher()

        assert await hasher.verify("secret123", "not-a-hash") is False

    async def test_salted(self):
        """Test hashing the same password twice gives different hashes."""
        hasher = fast_hasher()

        assert await hasher.hash("pw1234") != await hasher.hash("pw1234")
