"""Unit tests for sorting decryption key lists."""

import base64
import logging

import pytest

from pykeydetect.exceptions import (
    Base64DecodeError,
    MissingPasswordError,
    UnknownFormatError,
    WrongPasswordError,
)
from pykeydetect.services import DecryptionKeySorter, sort_decryption_keys


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestSortDecryptionKeys:
    """Test sorting with the default separators."""

    def test_single_private_key(self, rsa_pkcs8_der):
        keys = sort_decryption_keys(_b64(rsa_pkcs8_der))

        assert keys.private_keys == [rsa_pkcs8_der]
        assert keys.private_key_passwords == [None]
        assert set(keys) == {"privkeys", "privkeys-passwords"}

    def test_passwords_parallel_private_keys(
        self, rsa_legacy_encrypted_pem, ec_sec1_pem, password
    ):
        items = ",".join(
            [
                f"{_b64(rsa_legacy_encrypted_pem)}:{_b64(password)}",
                f"{_b64(ec_sec1_pem)}:",
            ]
        )

        keys = sort_decryption_keys(items)

        assert keys.private_keys == [rsa_legacy_encrypted_pem, ec_sec1_pem]
        assert keys.private_key_passwords == [password, b""]

    def test_mixed_material(self, cert_pem, gpg_key_ring, rsa_pkcs1_der):
        items = ",".join([_b64(cert_pem), _b64(gpg_key_ring), _b64(rsa_pkcs1_der)])

        keys = sort_decryption_keys(items)

        assert keys.x509s == [cert_pem]
        assert keys.gpg_private_keys == [gpg_key_ring]
        assert keys.private_keys == [rsa_pkcs1_der]
        assert keys.private_key_passwords == [None]

    def test_dh_private_key(self, dh_pkcs8_der):
        keys = sort_decryption_keys(_b64(dh_pkcs8_der))

        assert keys.private_keys == [dh_pkcs8_der]
        assert keys.private_key_passwords == [None]

    def test_certificate_only_has_no_private_key_labels(self, cert_der):
        keys = sort_decryption_keys(_b64(cert_der))

        assert list(keys) == ["x509s"]

    def test_wrong_password_aborts(self, rsa_legacy_encrypted_pem, cert_pem):
        items = f"{_b64(rsa_legacy_encrypted_pem)}:{_b64(b'nope')},{_b64(cert_pem)}"

        with pytest.raises(WrongPasswordError):
            sort_decryption_keys(items)

    def test_missing_password_aborts(self, rsa_pkcs8_encrypted_pem):
        with pytest.raises(MissingPasswordError):
            sort_decryption_keys(_b64(rsa_pkcs8_encrypted_pem))

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_unknown_entry_aborts(self, position, cert_pem, rsa_pkcs8_der):
        items = [_b64(cert_pem), _b64(rsa_pkcs8_der)]
        items.insert(position, _b64(b"definitely not a key"))

        with pytest.raises(UnknownFormatError, match="Unknown decryption key type"):
            sort_decryption_keys(",".join(items))

    def test_public_key_is_not_a_decryption_key(self, rsa_public_pem):
        with pytest.raises(UnknownFormatError):
            sort_decryption_keys(_b64(rsa_public_pem))

    def test_empty_entry(self, cert_pem):
        with pytest.raises(UnknownFormatError):
            sort_decryption_keys(f"{_b64(cert_pem)},")

    def test_bad_base64(self, cert_pem):
        with pytest.raises(Base64DecodeError):
            sort_decryption_keys(f"{_b64(cert_pem)},%%%")

    def test_bad_password_base64(self, rsa_pkcs8_der):
        with pytest.raises(Base64DecodeError, match="password"):
            sort_decryption_keys(f"{_b64(rsa_pkcs8_der)}:%%%")

    def test_rejection_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pykeydetect"):
            with pytest.raises(UnknownFormatError):
                sort_decryption_keys(_b64(b"junk"))

        assert "entry 0" in caplog.text
        assert "UNKNOWN_FORMAT" in caplog.text


class TestDecryptionKeySorter:
    """Test sorter configuration."""

    def test_custom_separators(self, rsa_pkcs8_der, cert_der, password):
        sorter = DecryptionKeySorter(entry_separator=";", password_separator="|")
        items = f"{_b64(rsa_pkcs8_der)}|{_b64(password)};{_b64(cert_der)}"

        keys = sorter.sort(items)

        assert keys.private_key_passwords == [password]
        assert keys.x509s == [cert_der]

    def test_equal_separators(self):
        with pytest.raises(ValueError, match="must differ"):
            DecryptionKeySorter(entry_separator=":")

    def test_prefix(self):
        sorter = DecryptionKeySorter(prefix="--decryption-keys")

        with pytest.raises(UnknownFormatError, match="^--decryption-keys: Unknown"):
            sorter.sort(_b64(b"junk"))

    def test_prefix_does_not_affect_classification(self, cert_der):
        sorter = DecryptionKeySorter(prefix="keys with missing password")

        keys = sorter.sort(_b64(cert_der))

        assert keys.x509s == [cert_der]

    def test_prefix_on_password_errors(self, rsa_legacy_encrypted_pem):
        sorter = DecryptionKeySorter(prefix="--decryption-keys")

        with pytest.raises(
            MissingPasswordError, match="^--decryption-keys: Missing password"
        ):
            sorter.sort(_b64(rsa_legacy_encrypted_pem))
