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
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from pykeydetect.exceptions import Base64DecodeError

__all__ = ["KeyEntry"]


def _b64decode(value: str) -> bytes:
    return base64.b64decode(value.strip(), validate=True)


class KeyEntry(BaseModel):
    """One decoded item of a decryption key list: material and optional password."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    PASSWORD_SEPARATOR: ClassVar[str] = ":"

    material: bytes = Field(repr=False)
    password: bytes | None = Field(default=None, repr=False)

    @classmethod
    def from_b64(cls, item: str, *, separator: str | None = None) -> KeyEntry:
        """Decode ``base64(material)[:base64(password)]``."""
        b64_material, sep, b64_password = item.partition(
            separator or cls.PASSWORD_SEPARATOR
        )

        try:
            material = _b64decode(b64_material)
        except (binascii.Error, ValueError) as e:
            msg = "Could not base64 decode a passed decryption key"
            raise Base64DecodeError(msg) from e

        password: bytes | None = None
        if sep:
            try:
                password = _b64decode(b64_password)
            except (binascii.Error, ValueError) as e:
                msg = "Could not base64 decode a passed decryption key password"
                raise Base64DecodeError(msg) from e

        return cls(material=material, password=password)

    @property
    def has_password(self) -> bool:
        """Whether a password segment was present, even an empty one."""
        return self.password is not None
