"""
pykeydetect.models.

~~~~~~~~~~~~~~~~~~

:copyright: (c) 2025-present hexguard
:license: MIT, see LICENSE for more details.
"""

from .key_entry import KeyEntry
from .key_set import (
    GPG_PRIVATE_KEYS,
    PRIVATE_KEY_PASSWORDS,
    PRIVATE_KEYS,
    X509S,
    DecryptionKeySet,
    label_for,
)
from .parsed_key import KeyObject, ParsedKey, key_algorithm

__all__ = [
    "GPG_PRIVATE_KEYS",
    "PRIVATE_KEYS",
    "PRIVATE_KEY_PASSWORDS",
    "X509S",
    "DecryptionKeySet",
    "KeyEntry",
    "KeyObject",
    "ParsedKey",
    "key_algorithm",
    "label_for",
]
