"""ULID identifiers for users and reservations."""

import ulid

ULID_LENGTH = 26


def generate_ulid() -> str:
    """New time-ordered id: 26 Crockford base32 characters."""
    return str(ulid.ULID())


def is_valid_ulid(value: object) -> bool:
    """Whether ``value`` is a well-formed ULID string; ids taken from URLs are untrusted."""
    if not isinstance(value, str) or len(value) != ULID_LENGTH:
        return False
    try:
        ulid.ULID.from_str(value)
    except ValueError:
        return False
    return True
