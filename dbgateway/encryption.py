"""
Encryption utilities for stored connection strings.
Uses Fernet symmetric encryption from cryptography library.
"""
import base64
import hashlib
import logging

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


def get_fernet_key(passphrase):
    """
    Convert a configured passphrase to a proper Fernet key format.
    """
    # Ensure the key is 32 bytes and base64 encoded for Fernet
    hashed = hashlib.sha256(passphrase.encode()).digest()
    return base64.urlsafe_b64encode(hashed)


def encrypt_secret(plain_text, passphrase):
    """
    Encrypt a plain text value.

    Args:
        plain_text (str): The value to encrypt
        passphrase (str): Passphrase the Fernet key is derived from

    Returns:
        str: Encrypted value as a string
    """
    if not plain_text:
        return ""

    fernet = Fernet(get_fernet_key(passphrase))
    encrypted = fernet.encrypt(plain_text.encode())
    return encrypted.decode()


def decrypt_secret(encrypted_text, passphrase):
    """
    Decrypt an encrypted value.

    Args:
        encrypted_text (str): The encrypted value
        passphrase (str): Passphrase the Fernet key is derived from

    Returns:
        str: Decrypted plain text
    """
    if not encrypted_text:
        return ""

    fernet = Fernet(get_fernet_key(passphrase))
    try:
        decrypted = fernet.decrypt(encrypted_text.encode())
        return decrypted.decode()
    except InvalidToken:
        # Values stored before a key was configured are still plaintext
        logger.warning("Stored value is not a valid token for the configured key, using it as stored")
        return encrypted_text
