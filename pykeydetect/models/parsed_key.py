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

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, TypeAlias, final

from cryptography.hazmat.primitives.asymmetric import (
    dh,
    dsa,
    ec,
    ed448,
    ed25519,
    rsa,
    x448,
    x25519,
)

from pykeydetect.core._internal._protocols import KeyAlgorithm, KeyEncoding

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )

__all__ = ["KeyObject", "ParsedKey", "key_algorithm"]

KeyObject: TypeAlias = "PrivateKeyTypes | PublicKeyTypes | bytes"

_ALGORITHMS: Final[tuple[tuple[tuple[type, ...], KeyAlgorithm], ...]] = (
    ((rsa.RSAPrivateKey, rsa.RSAPublicKey), KeyAlgorithm.RSA),
    ((dsa.DSAPrivateKey, dsa.DSAPublicKey), KeyAlgorithm.DSA),
    ((ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey), KeyAlgorithm.EC),
    ((ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey), KeyAlgorithm.ED25519),
    ((ed448.Ed448PrivateKey, ed448.Ed448PublicKey), KeyAlgorithm.ED448),
    ((x25519.X25519PrivateKey, x25519.X25519PublicKey), KeyAlgorithm.X25519),
    ((x448.X448PrivateKey, x448.X448PublicKey), KeyAlgorithm.X448),
    ((dh.DHPrivateKey, dh.DHPublicKey), KeyAlgorithm.DH),
    ((bytes,), KeyAlgorithm.OCT),
)

_PUBLIC_KEY_TYPES: Final[tuple[type, ...]] = (
    rsa.RSAPublicKey,
    dsa.DSAPublicKey,
    ec.EllipticCurvePublicKey,
    ed25519.Ed25519PublicKey,
    ed448.Ed448PublicKey,
    x25519.X25519PublicKey,
    x448.X448PublicKey,
    dh.DHPublicKey,
)


def key_algorithm(key: KeyObject) -> KeyAlgorithm:
    """Map a decoded key object to its algorithm tag."""
    for types, algorithm in _ALGORITHMS:
        if isinstance(key, types):
            return algorithm

    msg = f"Unsupported key type: {type(key).__name__}"
    raise TypeError(msg)


@final
@dataclass(frozen=True, slots=True)
class ParsedKey:
    """
    A key recovered by one of the detection chains.

    ``algorithm`` and ``encoding`` together tag the concrete representation
    held in ``key``, so consumers can dispatch without probing its type.
    Symmetric JWKs carry their raw secret as ``bytes``.
    """

    key: KeyObject
    algorithm: KeyAlgorithm
    encoding: KeyEncoding
    pem: bool = False
    encrypted: bool = False

    @classmethod
    def from_key(
        cls,
        key: KeyObject,
        encoding: KeyEncoding,
        *,
        pem: bool = False,
        encrypted: bool = False,
    ) -> ParsedKey:
        """Build a tagged key from a decoder result."""
        return cls(
            key=key,
            algorithm=key_algorithm(key),
            encoding=encoding,
            pem=pem,
            encrypted=encrypted,
        )

    @property
    def is_public(self) -> bool:
        """Whether only the public half of an asymmetric key is present."""
        return isinstance(self.key, _PUBLIC_KEY_TYPES)
