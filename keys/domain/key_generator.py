"""
Key string generation.
"""
import secrets
import string

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_GROUPS = 5
KEY_GROUP_LENGTH = 5


def generate_key_string() -> str:
    """
    Generate a key in format: XXXXX-XXXXX-XXXXX-XXXXX-XXXXX.

    Uniqueness is not guaranteed here; the store's unique constraint
    rejects collisions and the caller retries.

    Returns:
        Generated key string
    """
    parts = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_GROUP_LENGTH))
        for _ in range(KEY_GROUPS)
    ]
    return "-".join(parts)


class KeyGenerator:
    """Domain service for key generation."""

    @staticmethod
    def generate() -> str:
        """
        Generate a key string.

        Returns:
            Generated key string
        """
        return generate_key_string()
