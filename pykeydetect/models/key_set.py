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

from collections.abc import Iterator, Mapping
from typing import Final, final

from pykeydetect.core._internal._protocols import MaterialKind

__all__ = [
    "GPG_PRIVATE_KEYS",
    "PRIVATE_KEYS",
    "PRIVATE_KEY_PASSWORDS",
    "X509S",
    "DecryptionKeySet",
    "label_for",
]

PRIVATE_KEYS: Final[str] = "privkeys"
PRIVATE_KEY_PASSWORDS: Final[str] = "privkeys-passwords"
X509S: Final[str] = "x509s"
GPG_PRIVATE_KEYS: Final[str] = "gpg-privatekeys"

_LABELS: Final[dict[MaterialKind, str]] = {
    MaterialKind.PRIVATE_KEY: PRIVATE_KEYS,
    MaterialKind.CERTIFICATE: X509S,
    MaterialKind.GPG_KEY_RING: GPG_PRIVATE_KEYS,
}

_VALID_LABELS: Final[frozenset[str]] = frozenset(
    (*_LABELS.values(), PRIVATE_KEY_PASSWORDS)
)


def label_for(kind: MaterialKind) -> str:
    """Return the bucket label used for ``kind`` in a decryption key set."""
    try:
        return _LABELS[kind]
    except KeyError:
        msg = f"{kind.name} material has no decryption key bucket"
        raise ValueError(msg) from None


@final
class DecryptionKeySet(Mapping[str, list[bytes | None]]):
    """
    Decryption parameters sorted by material kind.

    Only labels that received at least one entry are present. Entries under
    ``privkeys-passwords`` line up index for index with ``privkeys``; a
    ``None`` marks a key that was given without a password.
    """

    __slots__ = ("_buckets",)

    def __init__(self, buckets: Mapping[str, list[bytes | None]]) -> None:
        unknown = set(buckets) - _VALID_LABELS
        if unknown:
            msg = f"Unknown decryption key labels: {sorted(unknown)}"
            raise ValueError(msg)

        keys = buckets.get(PRIVATE_KEYS, [])
        passwords = buckets.get(PRIVATE_KEY_PASSWORDS, [])
        if len(keys) != len(passwords):
            msg = (
                f"{len(keys)} private keys but {len(passwords)} private key "
                "passwords"
            )
            raise ValueError(msg)

        self._buckets: dict[str, list[bytes | None]] = {
            label: list(values) for label, values in buckets.items() if values
        }

    def __getitem__(self, label: str) -> list[bytes | None]:
        return list(self._buckets[label])

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        counts = ", ".join(f"{k}={len(v)}" for k, v in self._buckets.items())
        return f"DecryptionKeySet({counts})"

    def _blobs(self, label: str) -> list[bytes]:
        return [v for v in self._buckets.get(label, []) if v is not None]

    @property
    def private_keys(self) -> list[bytes]:
        """Raw private key blobs in encounter order."""
        return self._blobs(PRIVATE_KEYS)

    @property
    def private_key_passwords(self) -> list[bytes | None]:
        """Passwords parallel to :attr:`private_keys`."""
        return list(self._buckets.get(PRIVATE_KEY_PASSWORDS, []))

    @property
    def x509s(self) -> list[bytes]:
        """Raw X.509 certificate blobs in encounter order."""
        return self._blobs(X509S)

    @property
    def gpg_private_keys(self) -> list[bytes]:
        """Raw OpenPGP key ring blobs in encounter order."""
        return self._blobs(GPG_PRIVATE_KEYS)

    def as_dict(self) -> dict[str, list[bytes | None]]:
        """Return a plain ``dict`` copy of the populated buckets."""
        return {label: list(values) for label, values in self._buckets.items()}
