import pytest

from cryptnotes import crypto


def test_round_trip():
    data = "Привет, notes!\n".encode("utf-8")
    assert crypto.decrypt(crypto.encrypt(data, "pw"), "pw") == data


def test_round_trip_empty_plaintext():
    assert crypto.decrypt(crypto.encrypt(b"", "pw"), "pw") == b""


def test_round_trip_binary():
    data = bytes(range(256)) * 4
    assert crypto.decrypt(crypto.encrypt(data, "pässwörd"), "pässwörd") == data


def test_encrypt_is_not_deterministic():
    first = crypto.encrypt(b"same text", "pw")
    second = crypto.encrypt(b"same text", "pw")
    assert first != second
    # Salt differs as well as IV
    assert first[1:1 + crypto.SALT_SIZE] != second[1:1 + crypto.SALT_SIZE]


def test_ciphertext_does_not_contain_plaintext():
    ciphertext = crypto.encrypt(b"top secret diary entry", "pw")
    assert b"top secret" not in ciphertext


def test_wrong_password():
    ciphertext = crypto.encrypt(b"hello", "right")
    with pytest.raises(crypto.DecryptionError):
        crypto.decrypt(ciphertext, "wrong")


def test_tampered_salt():
    ciphertext = bytearray(crypto.encrypt(b"hello", "pw"))
    ciphertext[1] ^= 0xFF
    with pytest.raises(crypto.DecryptionError):
        crypto.decrypt(bytes(ciphertext), "pw")


def test_tampered_token():
    ciphertext = crypto.encrypt(b"hello", "pw")
    header = ciphertext[:1 + crypto.SALT_SIZE]
    with pytest.raises(crypto.DecryptionError):
        crypto.decrypt(header + b"not-a-fernet-token", "pw")


def test_truncated():
    with pytest.raises(crypto.DecryptionError):
        crypto.decrypt(b"\x01short", "pw")


def test_unknown_version():
    ciphertext = bytearray(crypto.encrypt(b"hello", "pw"))
    ciphertext[0] = 99
    with pytest.raises(crypto.DecryptionError):
        crypto.decrypt(bytes(ciphertext), "pw")


def test_errors_share_base_class():
    assert issubclass(crypto.DecryptionError, crypto.CryptoError)
    assert issubclass(crypto.InternalCryptoError, crypto.CryptoError)


def test_empty_password_rejected():
    with pytest.raises(ValueError):
        crypto.encrypt(b"hello", "")


def test_derive_key_depends_on_salt():
    assert crypto.derive_key("pw", b"a" * 16) == crypto.derive_key("pw", b"a" * 16)
    assert crypto.derive_key("pw", b"a" * 16) != crypto.derive_key("pw", b"b" * 16)
