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

from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )

__all__ = (
    "KeyAlgorithm",
    "KeyDecoderProtocol",
    "KeyEncoding",
    "MaterialKind",
)


class MaterialKind(Enum):
    """Kinds of cryptographic material a blob can be classified as."""

    PRIVATE_KEY = auto()
    PUBLIC_KEY = auto()
    CERTIFICATE = auto()
    GPG_KEY_RING = auto()


class KeyAlgorithm(Enum):
    """Key algorithms recognised in decoded key objects."""

    RSA = auto()
    DSA = auto()
    EC = auto()  # ECDSA / ECDH (P-256, P-384, P-521, ...)
    ED25519 = auto()  # EdDSA signing (RFC 8032)
    ED448 = auto()
    X25519 = auto()  # ECDH key agreement (RFC 7748)
    X448 = auto()
    DH = auto()  # Finite field Diffie-Hellman (PKCS #3)
    OCT = auto()  # Symmetric JWK ("kty": "oct")


class KeyEncoding(Enum):
    """Encodings a key was recovered from."""

    PKCS8 = auto()  # PrivateKeyInfo / OneAsymmetricKey
    PKCS1 = auto()  # RSAPrivateKey
    SEC1 = auto()  # ECPrivateKey (RFC 5915)
    SPKI = auto()  # SubjectPublicKeyInfo
    JWK = auto()  # JSON Web Key (RFC 7517)


@runtime_checkable
class KeyDecoderProtocol(Protocol):
    """A single step of a fallback decoding chain."""

    def __call__(self, data: bytes) -> PrivateKeyTypes | PublicKeyTypes:
        """Decode ``data`` or raise ``ValueError`` if it is not this encoding."""
        ...
