"""
Unit tests for key string generation.
"""
import re

from keys.domain.key_generator import KEY_ALPHABET, KeyGenerator, generate_key_string

KEY_PATTERN = re.compile(r"^[A-Z0-9]{5}(-[A-Z0-9]{5}){4}$")


class TestKeyGenerator:
    """Tests for KeyGenerator."""

    def test_format(self):
        """Test the five groups of five symbols."""
        key = KeyGenerator.generate()
        assert KEY_PATTERN.match(key)
        assert len(key) == 29

    def test_alphabet(self):
        """Test that only uppercase letters and digits are used."""
        assert len(KEY_ALPHABET) == 36
        symbols = set("".join(generate_key_string() for _ in range(200)).replace("-", ""))
        assert symbols <= set(KEY_ALPHABET)

    def test_keys_differ(self):
        """Test that repeated calls produce distinct keys."""
        keys = {KeyGenerator.generate() for _ in range(500)}
        assert len(keys) == 500
