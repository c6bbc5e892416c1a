"""Prefixed ID generation.

Session keys use a ``{prefix}_{random}`` format so a key's origin is
visible at a glance, e.g. ``session_k3pw7md4bnxa``.  The relay treats
session keys as opaque; this only matters for clients that mint them.
"""

import secrets
import string

_ALPHABET = string.ascii_lowercase + string.digits
_DEFAULT_LENGTH = 12


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Generate a prefixed random ID.

    Args:
        prefix: Short descriptor (e.g. ``"session"``).
        length: Number of random alphanumeric characters after the prefix.

    Returns:
        ``"{prefix}_{random}"`` string.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"
