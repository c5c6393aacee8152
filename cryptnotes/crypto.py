"""Password-based encryption layer for note fields."""

import base64
import logging
import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

_LOG = logging.getLogger(__name__)

# Layout of a ciphertext: VERSION || salt || Fernet token.
# The Fernet token carries its own random IV and HMAC-SHA256 tag.
FORMAT_VERSION = 1
SALT_SIZE = 16
KEY_SIZE = 32
PBKDF2_ITERATIONS = 390_000

_HEADER_SIZE = 1 + SALT_SIZE


class CryptoError(Exception):
    """Base exception for cipher errors."""
    pass


class DecryptionError(CryptoError):
    """Wrong password, tampered or truncated ciphertext."""
    pass


class InternalCryptoError(CryptoError):
    """The cryptography backend failed unexpectedly."""
    pass


def _check_password(password: str) -> bytes:
    if not isinstance(password, str):
        raise TypeError("password must be a str")
    if not password:
        raise ValueError("password must not be empty")
    return password.encode("utf-8")


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a Fernet key from a password and salt.

    Uses PBKDF2-HMAC-SHA256. The raw 32-byte key is returned in the
    urlsafe base64 form that Fernet expects.
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(_check_password(password)))


def encrypt(plaintext: bytes, password: str) -> bytes:
    """Encrypt plaintext under a password.

    A fresh salt and IV are drawn on every call, so encrypting the same
    plaintext twice never yields the same bytes.

    Raises:
        InternalCryptoError: If the cryptography backend fails
    """
    if not isinstance(plaintext, (bytes, bytearray)):
        raise TypeError("plaintext must be bytes")

    _check_password(password)

    salt = os.urandom(SALT_SIZE)
    try:
        key = derive_key(password, salt)
        token = Fernet(key).encrypt(bytes(plaintext))
    except (UnsupportedAlgorithm, ValueError) as e:
        _LOG.error("Encryption failed: %s", type(e).__name__)
        raise InternalCryptoError(f"Encryption failed: {e}") from e

    return bytes([FORMAT_VERSION]) + salt + token


def decrypt(ciphertext: bytes, password: str) -> bytes:
    """Decrypt bytes produced by :func:`encrypt`.

    Raises:
        DecryptionError: If the password is wrong or the data was altered
    """
    if not isinstance(ciphertext, (bytes, bytearray)):
        raise TypeError("ciphertext must be bytes")
    ciphertext = bytes(ciphertext)

    if len(ciphertext) <= _HEADER_SIZE:
        raise DecryptionError("Ciphertext is truncated")
    if ciphertext[0] != FORMAT_VERSION:
        raise DecryptionError(f"Unsupported ciphertext version: {ciphertext[0]}")

    salt = ciphertext[1:_HEADER_SIZE]
    token = ciphertext[_HEADER_SIZE:]
    key = derive_key(password, salt)
    try:
        return Fernet(key).decrypt(token)
    except InvalidToken as e:
        _LOG.debug("Decryption rejected (bad password or tampered data)")
        raise DecryptionError("Wrong password or corrupted data") from e
