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
from typing import ClassVar, Final

__all__ = [
    "Base64DecodeError",
    "ErrorKind",
    "KeyDetectError",
    "MalformedEncodingError",
    "MissingPasswordError",
    "PasswordError",
    "PasswordInputError",
    "UnknownFormatError",
    "WrongPasswordError",
    "is_password_error",
    "with_prefix",
]

_PASSWORD_MARKER: Final[str] = "password"
_PASSWORD_QUALIFIERS: Final[tuple[str, ...]] = ("missing", "wrong")


class ErrorKind(Enum):
    """Failure categories reported while classifying key material."""

    BASE64_DECODE_FAILURE = auto()
    MISSING_PASSWORD = auto()
    WRONG_PASSWORD = auto()
    MALFORMED_ENCODING = auto()
    UNKNOWN_FORMAT = auto()


class KeyDetectError(Exception):
    """Base error for key material detection."""

    kind: ClassVar[ErrorKind]


class Base64DecodeError(KeyDetectError):
    """Raised when a batch entry is not valid base64."""

    kind = ErrorKind.BASE64_DECODE_FAILURE


class PasswordError(KeyDetectError):
    """A private key was recognised but its password is unusable."""


class MissingPasswordError(PasswordError):
    """Raised when an encrypted private key is given without a password."""

    kind = ErrorKind.MISSING_PASSWORD


class WrongPasswordError(PasswordError):
    """Raised when an encrypted private key cannot be decrypted."""

    kind = ErrorKind.WRONG_PASSWORD


class MalformedEncodingError(KeyDetectError):
    """Raised when the envelope is recognised but its content is not."""

    kind = ErrorKind.MALFORMED_ENCODING


class UnknownFormatError(KeyDetectError):
    """Raised when the input matches none of the supported encodings."""

    kind = ErrorKind.UNKNOWN_FORMAT


class PasswordInputError(OSError):
    """Raised when a password cannot be read from the terminal."""


def with_prefix(prefix: str, message: str) -> str:
    """Prepend the caller supplied context to an error message."""
    return f"{prefix}: {message}" if prefix else message


def is_password_error(err: BaseException | None) -> bool:
    """
    Check whether an error is related to a missing or wrong password.

    Errors arrive from several decoders that share no common type, so the
    rendered message is the only signal: it must mention ``password`` and
    one of ``missing`` or ``wrong``, case-insensitively.
    """
    if err is None:
        return False

    msg = str(err).lower()
    return _PASSWORD_MARKER in msg and any(q in msg for q in _PASSWORD_QUALIFIERS)
