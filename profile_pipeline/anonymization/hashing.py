"""
One-way identifier hashing.

Vendor account identifiers are replaced by a SHA-256 digest so that raw
vendor IDs never need to be retained. The digest is deterministic (no salt,
no key): the same account must always map to the same profile id so that
repeated uploads converge on one record. It is an identifier, not a secret.
"""

import hashlib


def hash_identifier(value: str) -> str:
    """
    Hash an identifier into a stable, non-reversible hex string.

    Args:
        value: Identifier to hash

    Returns:
        64-character lowercase hex SHA-256 digest

    Raises:
        ValueError: If value is not a non-empty string
    """
    if not isinstance(value, str) or not value:
        raise ValueError("Identifier to hash must be a non-empty string")
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def derive_profile_id(platform: str, vendor_id: str) -> str:
    """
    Derive the profile primary key for a vendor account.

    Args:
        platform: Platform name ("tinder" or "hinge")
        vendor_id: Vendor account identity string

    Returns:
        Profile id (hex digest)
    """
    if not vendor_id:
        raise ValueError("Vendor identifier must be a non-empty string")
    return hash_identifier(platform + vendor_id)
