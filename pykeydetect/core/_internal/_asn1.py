"""
The MIT License (MIT).

Copyright (c) 2025-present hexguard

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc5280, rfc5915, rfc5958, rfc8017

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )
    from pyasn1.type.base import Asn1Item

__all__ = [
    "decode_pkcs1_private_key",
    "decode_pkcs8_private_key",
    "decode_sec1_private_key",
    "decode_spki_public_key",
]

# Expected DER shapes, checked before handing bytes to cryptography, which
# would otherwise accept any of the private key structures in one call.
_PKCS8_SPEC: Final[type[Asn1Item]] = rfc5958.OneAsymmetricKey
_PKCS1_SPEC: Final[type[Asn1Item]] = rfc8017.RSAPrivateKey
_SEC1_SPEC: Final[type[Asn1Item]] = rfc5915.ECPrivateKey
_SPKI_SPEC: Final[type[Asn1Item]] = rfc5280.SubjectPublicKeyInfo


def _require_structure(data: bytes, spec: type[Asn1Item], name: str) -> None:
    """Ensure ``data`` is exactly one DER value of the given ASN.1 type."""
    try:
        _, rest = der_decoder.decode(data, asn1Spec=spec())
    except PyAsn1Error as e:
        msg = f"not a DER encoded {name} structure"
        raise ValueError(msg) from e
    if rest:
        msg = f"{len(rest)} trailing bytes after {name} structure"
        raise ValueError(msg)


def _load_private(data: bytes, spec: type[Asn1Item], name: str) -> PrivateKeyTypes:
    _require_structure(data, spec, name)
    try:
        return load_der_private_key(data, password=None)
    except (TypeError, UnsupportedAlgorithm) as e:
        msg = f"could not load {name} private key"
        raise ValueError(msg) from e


def decode_pkcs8_private_key(data: bytes) -> PrivateKeyTypes:
    """Decode a DER PKCS#8 (RFC 5958) private key."""
    return _load_private(data, _PKCS8_SPEC, "PKCS#8")


def decode_pkcs1_private_key(data: bytes) -> PrivateKeyTypes:
    """Decode a DER PKCS#1 RSA private key."""
    return _load_private(data, _PKCS1_SPEC, "PKCS#1")


def decode_sec1_private_key(data: bytes) -> PrivateKeyTypes:
    """Decode a DER SEC1 (RFC 5915) elliptic curve private key."""
    return _load_private(data, _SEC1_SPEC, "SEC1")


def decode_spki_public_key(data: bytes) -> PublicKeyTypes:
    """Decode a DER PKIX SubjectPublicKeyInfo public key."""
    _require_structure(data, _SPKI_SPEC, "PKIX")
    try:
        return load_der_public_key(data)
    except UnsupportedAlgorithm as e:
        msg = "could not load PKIX public key"
        raise ValueError(msg) from e
