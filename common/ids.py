"""
common.ids
~~~~~~~~~~
Random, URL-safe identifiers used for config slugs and environment secrets.
"""
import secrets
import string

BASE62_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_id(length: int = 24) -> str:
    """Return *length* cryptographically random base62 characters."""
    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))


def generate_short_id(length: int = 8) -> str:
    """Short, readable id used as a config slug."""
    return generate_id(length)


def generate_secret_key(slug: str) -> str:
    """
    Environment secret of the form ``sec_<slug prefix>_<24 random chars>``.

    >>> generate_secret_key("production").startswith("sec_prod_")
    True
    """
    return f"sec_{slug[:4].lower()}_{generate_id(24)}"
