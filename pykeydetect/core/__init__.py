"""
pykeydetect.core.

~~~~~~~~~~~~~~~~

:copyright: (c) 2025-present hexguard
:license: MIT, see LICENSE for more details.
"""

from ._internal._pem import PemBlock, decode_pem
from ._internal._protocols import KeyAlgorithm, KeyEncoding, MaterialKind
from .key_parser import *

__all__ = [
    "DER_PRIVATE_KEY_CHAIN",
    "DER_PUBLIC_KEY_CHAIN",
    "PEM_PRIVATE_KEY_CHAIN",
    "Detection",
    "KeyAlgorithm",
    "KeyEncoding",
    "MaterialKind",
    "PemBlock",
    "decode_pem",
    "detect_material",
    "is_certificate",
    "is_gpg_private_key_ring",
    "is_private_key",
    "is_public_key",
    "parse_certificate",
    "parse_private_key",
    "parse_public_key",
]
