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

import logging
from typing import TYPE_CHECKING, Final, final

from pykeydetect.core import (
    MaterialKind,
    is_certificate,
    is_gpg_private_key_ring,
    parse_private_key,
)
from pykeydetect.exceptions import (
    KeyDetectError,
    PasswordError,
    UnknownFormatError,
    is_password_error,
    with_prefix,
)
from pykeydetect.models import (
    PRIVATE_KEY_PASSWORDS,
    DecryptionKeySet,
    KeyEntry,
    label_for,
)

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["DecryptionKeySorter", "sort_decryption_keys"]

_logger = logging.getLogger(__name__)


@final
class DecryptionKeySorter:
    """
    Sorts a delimited list of base64 entries into decryption parameters.

    Each entry is ``base64(material)`` or ``base64(material):base64(password)``
    and must be a private key, an X.509 certificate or an OpenPGP key ring.
    Sorting is all or nothing: the first undecodable, unrecognised or
    password protected but unusable entry aborts the whole list.
    """

    __slots__ = ("_entry_separator", "_password_separator", "_prefix")

    ENTRY_SEPARATOR: Final[str] = ","
    PASSWORD_SEPARATOR: Final[str] = ":"

    def __init__(
        self,
        *,
        entry_separator: str | None = None,
        password_separator: str | None = None,
        prefix: str = "",
    ) -> None:
        self._entry_separator = entry_separator or self.ENTRY_SEPARATOR
        self._password_separator = password_separator or self.PASSWORD_SEPARATOR
        if self._entry_separator == self._password_separator:
            msg = "Entry and password separators must differ"
            raise ValueError(msg)
        self._prefix = prefix

    def sort(self, items: str) -> DecryptionKeySet:
        """Parse ``items`` and return the entries grouped by material kind."""
        buckets: dict[str, list[bytes | None]] = {}

        for index, item in enumerate(items.split(self._entry_separator)):
            try:
                entry = KeyEntry.from_b64(item, separator=self._password_separator)
                kind = self._classify(entry)
            except KeyDetectError as e:
                _logger.warning(
                    "Rejecting decryption key list at entry %d: %s", index, e.kind.name
                )
                raise

            _logger.debug("Entry %d sorted as %s", index, kind.name)
            buckets.setdefault(label_for(kind), []).append(entry.material)
            if kind is MaterialKind.PRIVATE_KEY:
                buckets.setdefault(PRIVATE_KEY_PASSWORDS, []).append(entry.password)

        return DecryptionKeySet(buckets)

    def _classify(self, entry: KeyEntry) -> MaterialKind:
        probes: tuple[tuple[MaterialKind, Callable[[KeyEntry], bool]], ...] = (
            (MaterialKind.PRIVATE_KEY, self._is_private_key),
            (MaterialKind.CERTIFICATE, lambda e: is_certificate(e.material)),
            (MaterialKind.GPG_KEY_RING, lambda e: is_gpg_private_key_ring(e.material)),
        )
        for kind, probe in probes:
            if probe(entry):
                return kind

        msg = with_prefix(self._prefix, "Unknown decryption key type")
        raise UnknownFormatError(msg)

    def _is_private_key(self, entry: KeyEntry) -> bool:
        """Private key probe that lets password failures escape."""
        try:
            parse_private_key(entry.material, entry.password)
        except KeyDetectError as e:
            if isinstance(e, PasswordError) or is_password_error(e):
                raise type(e)(with_prefix(self._prefix, str(e))) from e
            return False
        return True


_DEFAULT_SORTER: Final[DecryptionKeySorter] = DecryptionKeySorter()


def sort_decryption_keys(items: str) -> DecryptionKeySet:
    """Sort a comma separated list of base64 entries with the default settings."""
    return _DEFAULT_SORTER.sort(items)
