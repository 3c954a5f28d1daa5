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

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Final, final

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import (
    BlockCipherAlgorithm,
    Cipher,
    algorithms,
    modes,
)

__all__ = [
    "PKCS8_ENCRYPTED_TYPE",
    "PemBlock",
    "PemCipher",
    "UnsupportedPemEncryptionError",
    "decode_pem",
    "decrypt_pem_block",
]

PKCS8_ENCRYPTED_TYPE: Final[str] = "ENCRYPTED PRIVATE KEY"
_DEK_INFO: Final[str] = "DEK-Info"
_SALT_SIZE: Final[int] = 8

_BACKEND = default_backend()

_PEM_RE: Final = re.compile(
    rb"-----BEGIN (?P<type>[^\r\n-]+)-----[ \t]*\r?\n"
    rb"(?P<body>.*?)"
    rb"-----END (?P=type)-----",
    re.DOTALL,
)


class UnsupportedPemEncryptionError(ValueError):
    """Raised when a DEK-Info header names an unknown cipher or bad IV."""


@final
@dataclass(frozen=True, slots=True)
class PemBlock:
    """A decoded RFC 1421 block: type label, headers and binary payload."""

    type: str
    data: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_legacy_encrypted(self) -> bool:
        """OpenSSL ``Proc-Type: 4,ENCRYPTED`` blocks carry a DEK-Info header."""
        return _DEK_INFO in self.headers

    @property
    def is_encrypted(self) -> bool:
        """Whether a password is needed to use the payload."""
        return self.is_legacy_encrypted or self.type == PKCS8_ENCRYPTED_TYPE


@final
@dataclass(frozen=True, slots=True)
class PemCipher:
    """A block cipher usable in a legacy DEK-Info header."""

    name: str
    key_size: int
    block_size: int
    algorithm: type[BlockCipherAlgorithm]


_PEM_CIPHERS: Final[dict[str, PemCipher]] = {
    c.name: c
    for c in (
        PemCipher("DES-CBC", 8, 8, TripleDES),
        PemCipher("DES-EDE3-CBC", 24, 8, TripleDES),
        PemCipher("AES-128-CBC", 16, 16, algorithms.AES),
        PemCipher("AES-192-CBC", 24, 16, algorithms.AES),
        PemCipher("AES-256-CBC", 32, 16, algorithms.AES),
    )
}


def _split_headers(body: bytes) -> tuple[dict[str, str], bytes]:
    """Separate ``Key: Value`` headers from the base64 text."""
    lines = body.splitlines()
    headers: dict[str, str] = {}

    if not lines or b":" not in lines[0]:
        return headers, body

    start = len(lines)
    for idx, line in enumerate(lines):
        if not line.strip():
            start = idx + 1
            break
        key, sep, value = line.partition(b":")
        if not sep:
            start = idx
            break
        headers[key.strip().decode("ascii", "replace")] = value.strip().decode(
            "ascii", "replace"
        )
    return headers, b"".join(lines[start:])


def decode_pem(data: bytes) -> PemBlock | None:
    """Return the first well formed PEM block in ``data``, if any."""
    for match in _PEM_RE.finditer(data):
        headers, b64 = _split_headers(match.group("body"))
        try:
            payload = base64.b64decode(b"".join(b64.split()), validate=True)
        except (binascii.Error, ValueError):
            continue
        return PemBlock(
            type=match.group("type").decode("ascii", "replace"),
            data=payload,
            headers=headers,
        )
    return None


def _bytes_to_key(password: bytes, salt: bytes, key_size: int) -> bytes:
    """OpenSSL ``EVP_BytesToKey`` with MD5 and a single iteration."""
    derived = b""
    digest = b""
    while len(derived) < key_size:
        md5 = hashes.Hash(hashes.MD5(), backend=_BACKEND)
        md5.update(digest + password + salt)
        digest = md5.finalize()
        derived += digest
    return derived[:key_size]


def _resolve_cipher(dek_info: str) -> tuple[PemCipher, bytes]:
    name, sep, iv_hex = dek_info.partition(",")
    cipher = _PEM_CIPHERS.get(name.strip().upper())
    if not sep or cipher is None:
        msg = f"unsupported PEM encryption {name.strip()!r}"
        raise UnsupportedPemEncryptionError(msg)

    try:
        iv = bytes.fromhex(iv_hex.strip())
    except ValueError as e:
        msg = "malformed IV in DEK-Info header"
        raise UnsupportedPemEncryptionError(msg) from e
    if len(iv) != cipher.block_size:
        msg = f"IV must be {cipher.block_size} bytes, got {len(iv)}"
        raise UnsupportedPemEncryptionError(msg)
    return cipher, iv


def decrypt_pem_block(block: PemBlock, password: bytes) -> bytes:
    """
    Decrypt a legacy OpenSSL encrypted PEM block.

    Raises :class:`UnsupportedPemEncryptionError` for headers that cannot be
    acted upon, and plain ``ValueError`` when decryption yields garbage,
    which is what an incorrect password looks like.
    """
    cipher, iv = _resolve_cipher(block.headers.get(_DEK_INFO, ""))

    if not block.data or len(block.data) % cipher.block_size:
        msg = "encrypted PEM data is not a multiple of the block size"
        raise ValueError(msg)

    key = _bytes_to_key(password, iv[:_SALT_SIZE], cipher.key_size)
    decryptor = Cipher(
        cipher.algorithm(key), modes.CBC(iv), backend=_BACKEND
    ).decryptor()
    padded = decryptor.update(block.data) + decryptor.finalize()

    unpadder = padding.PKCS7(cipher.block_size * 8).unpadder()
    return unpadder.update(padded) + unpadder.finalize()
