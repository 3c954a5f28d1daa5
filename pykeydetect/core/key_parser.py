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

import json
import logging
from typing import TYPE_CHECKING, Final, NamedTuple, NoReturn

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import load_der_private_key
from jwt import PyJWK, PyJWTError
from pgpy import PGPKey

from pykeydetect.exceptions import (
    KeyDetectError,
    MalformedEncodingError,
    MissingPasswordError,
    PasswordError,
    UnknownFormatError,
    WrongPasswordError,
    with_prefix,
)
from pykeydetect.models.parsed_key import ParsedKey

from ._internal._asn1 import (
    decode_pkcs1_private_key,
    decode_pkcs8_private_key,
    decode_sec1_private_key,
    decode_spki_public_key,
)
from ._internal._pem import (
    PKCS8_ENCRYPTED_TYPE,
    PemBlock,
    UnsupportedPemEncryptionError,
    decode_pem,
    decrypt_pem_block,
)
from ._internal._protocols import KeyDecoderProtocol, KeyEncoding, MaterialKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from typing_extensions import Buffer

__all__ = [
    "DER_PRIVATE_KEY_CHAIN",
    "DER_PUBLIC_KEY_CHAIN",
    "PEM_PRIVATE_KEY_CHAIN",
    "Detection",
    "detect_material",
    "is_certificate",
    "is_gpg_private_key_ring",
    "is_private_key",
    "is_public_key",
    "parse_certificate",
    "parse_private_key",
    "parse_public_key",
]

_logger = logging.getLogger(__name__)

DecoderChain = tuple[tuple[KeyEncoding, KeyDecoderProtocol], ...]

DER_PRIVATE_KEY_CHAIN: Final[DecoderChain] = (
    (KeyEncoding.PKCS8, decode_pkcs8_private_key),
    (KeyEncoding.PKCS1, decode_pkcs1_private_key),
    (KeyEncoding.SEC1, decode_sec1_private_key),
)
PEM_PRIVATE_KEY_CHAIN: Final[DecoderChain] = DER_PRIVATE_KEY_CHAIN
DER_PUBLIC_KEY_CHAIN: Final[DecoderChain] = (
    (KeyEncoding.SPKI, decode_spki_public_key),
)


class Detection(NamedTuple):
    """Outcome of :func:`detect_material`."""

    kind: MaterialKind
    value: ParsedKey | x509.Certificate | None


def _fail(
    prefix: str,
    message: str,
    exception_type: type[KeyDetectError],
    cause: BaseException | None = None,
) -> NoReturn:
    """Uniform error raising for the detection chains."""
    raise exception_type(with_prefix(prefix, message)) from cause


def _run_chain(
    chain: DecoderChain,
    data: bytes,
    *,
    pem: bool = False,
    encrypted: bool = False,
) -> ParsedKey:
    """Return the first successful decoding in ``chain``, in order."""
    failures: list[str] = []
    last: Exception | None = None

    for encoding, decoder in chain:
        try:
            parsed = ParsedKey.from_key(
                decoder(data), encoding, pem=pem, encrypted=encrypted
            )
        except (ValueError, TypeError) as e:
            failures.append(f"{encoding.name}: {e}")
            last = e
            continue
        _logger.debug("Decoded key as %s (pem=%s)", encoding.name, pem)
        return parsed

    msg = "; ".join(failures) or "empty decoder chain"
    raise ValueError(msg) from last


def _load_jwk(data: bytes, prefix: str) -> ParsedKey:
    try:
        obj = json.loads(data)
        if not isinstance(obj, dict):
            msg = "JWK must be a JSON object"
            raise TypeError(msg)
        jwk = PyJWK.from_dict(obj)
    except (ValueError, TypeError, KeyError, PyJWTError) as e:
        _fail(prefix, "Could not parse input as JWK", UnknownFormatError, e)

    return ParsedKey.from_key(jwk.key, KeyEncoding.JWK)


def _parse_jwk_private_key(data: bytes, prefix: str) -> ParsedKey:
    """Parse ``data`` as a JWK and make sure it is a private key."""
    parsed = _load_jwk(data, prefix)
    if parsed.is_public:
        _fail(prefix, "JWK is not a private key", MalformedEncodingError)
    return parsed


def _parse_jwk_public_key(data: bytes, prefix: str) -> ParsedKey:
    """Parse ``data`` as a JWK and make sure it is a public key."""
    parsed = _load_jwk(data, prefix)
    if not parsed.is_public:
        _fail(prefix, "JWK is not a public key", MalformedEncodingError)
    return parsed


def _decrypt_pkcs8_block(block: PemBlock, password: bytes, prefix: str) -> ParsedKey:
    try:
        key = load_der_private_key(block.data, password=password)
    except UnsupportedAlgorithm as e:
        _fail(prefix, "Unsupported PKCS#8 encryption", MalformedEncodingError, e)
    except (ValueError, TypeError) as e:
        _fail(
            prefix,
            "Wrong password: could not decrypt private key",
            WrongPasswordError,
            e,
        )
    return ParsedKey.from_key(key, KeyEncoding.PKCS8, pem=True, encrypted=True)


def _parse_pem_private_key(
    block: PemBlock, password: bytes | None, prefix: str
) -> ParsedKey:
    if block.is_encrypted and password is None:
        _fail(
            prefix,
            "Missing password for encrypted private key",
            MissingPasswordError,
        )

    if block.type == PKCS8_ENCRYPTED_TYPE:
        return _decrypt_pkcs8_block(block, password or b"", prefix)

    der = block.data
    if block.is_legacy_encrypted:
        try:
            der = decrypt_pem_block(block, password or b"")
        except UnsupportedPemEncryptionError as e:
            _fail(
                prefix,
                f"Could not decrypt private key: {e}",
                MalformedEncodingError,
                e,
            )
        except ValueError as e:
            _fail(
                prefix,
                "Wrong password: could not decrypt private key",
                WrongPasswordError,
                e,
            )

    try:
        return _run_chain(
            PEM_PRIVATE_KEY_CHAIN, der, pem=True, encrypted=block.is_encrypted
        )
    except ValueError as e:
        # Wrong keys pass the CBC padding check about once in 256 tries.
        if block.is_legacy_encrypted:
            _fail(
                prefix,
                "Wrong password: decrypted data is not a private key",
                WrongPasswordError,
                e,
            )
        _fail(prefix, "Could not parse private key", MalformedEncodingError, e)


def parse_private_key(
    data: Buffer, password: Buffer | None = None, prefix: str = ""
) -> ParsedKey:
    """
    Parse a private key in DER, PEM or JWK form.

    DER encodings are tried first (PKCS#8, PKCS#1, SEC1), then PEM, whose
    payload may be encrypted, then JWK as the last resort. A missing or
    wrong password on an encrypted PEM block raises a
    :class:`~pykeydetect.exceptions.PasswordError`; a superfluous password
    on unencrypted input is ignored.
    """
    raw = bytes(data)
    pwd = bytes(password) if password is not None else None

    try:
        return _run_chain(DER_PRIVATE_KEY_CHAIN, raw)
    except ValueError as e:
        _logger.debug("Input is not a DER private key: %s", e)

    block = decode_pem(raw)
    if block is None:
        return _parse_jwk_private_key(raw, prefix)

    _logger.debug("Found PEM block %r (encrypted=%s)", block.type, block.is_encrypted)
    return _parse_pem_private_key(block, pwd, prefix)


def is_private_key(data: Buffer, password: Buffer | None = None) -> bool:
    """Return whether ``data`` is a private key usable with ``password``."""
    try:
        parse_private_key(data, password)
    except KeyDetectError:
        return False
    return True


def parse_public_key(data: Buffer, prefix: str = "") -> ParsedKey:
    """Parse a public key in DER (PKIX), PEM or JWK form."""
    raw = bytes(data)

    try:
        return _run_chain(DER_PUBLIC_KEY_CHAIN, raw)
    except ValueError as e:
        _logger.debug("Input is not a DER public key: %s", e)

    block = decode_pem(raw)
    if block is None:
        return _parse_jwk_public_key(raw, prefix)

    try:
        return _run_chain(DER_PUBLIC_KEY_CHAIN, block.data, pem=True)
    except ValueError as e:
        _fail(prefix, "Could not parse public key", MalformedEncodingError, e)


def is_public_key(data: Buffer) -> bool:
    """Return whether ``data`` is a public key."""
    try:
        parse_public_key(data)
    except KeyDetectError:
        return False
    return True


def parse_certificate(data: Buffer, prefix: str = "") -> x509.Certificate:
    """Parse an X.509 certificate in DER form first and PEM form after."""
    raw = bytes(data)

    try:
        return x509.load_der_x509_certificate(raw)
    except ValueError as e:
        _logger.debug("Input is not a DER certificate: %s", e)

    block = decode_pem(raw)
    if block is None:
        _fail(prefix, "Could not PEM decode x509 certificate", MalformedEncodingError)

    try:
        return x509.load_der_x509_certificate(block.data)
    except ValueError as e:
        _fail(prefix, "Could not parse x509 certificate", MalformedEncodingError, e)


def is_certificate(data: Buffer) -> bool:
    """Return whether ``data`` is an X.509 certificate."""
    try:
        parse_certificate(data)
    except KeyDetectError:
        return False
    return True


def is_gpg_private_key_ring(data: Buffer) -> bool:
    """Return whether ``data`` deserializes as an OpenPGP key ring."""
    try:
        key, _ = PGPKey.from_blob(bytes(data))
    except Exception as e:  # noqa: BLE001
        _logger.debug("Input is not an OpenPGP key ring: %s", type(e).__name__)
        return False
    return key.fingerprint is not None


def detect_material(
    data: Buffer, password: Buffer | None = None, prefix: str = ""
) -> Detection:
    """
    Classify ``data`` as exactly one kind of key material.

    Kinds are probed in the order private key, certificate, public key and
    OpenPGP key ring. Password errors end the search since they prove the
    input is an encrypted private key.
    """
    raw = bytes(data)
    probes: tuple[
        tuple[MaterialKind, Callable[[], ParsedKey | x509.Certificate]], ...
    ] = (
        (MaterialKind.PRIVATE_KEY, lambda: parse_private_key(raw, password, prefix)),
        (MaterialKind.CERTIFICATE, lambda: parse_certificate(raw, prefix)),
        (MaterialKind.PUBLIC_KEY, lambda: parse_public_key(raw, prefix)),
    )

    for kind, probe in probes:
        try:
            return Detection(kind, probe())
        except PasswordError:
            raise
        except KeyDetectError as e:
            _logger.debug("Not %s: %s", kind.name, e)

    if is_gpg_private_key_ring(raw):
        return Detection(MaterialKind.GPG_KEY_RING, None)

    _fail(prefix, "Unknown key material type", UnknownFormatError)
