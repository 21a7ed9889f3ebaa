"""
Identifier encoding and entropy acquisition.
An identifier is 32 bytes carried as URL-safe base64 without padding.
"""

import base64
import binascii
import os
import re
from typing import Callable

from ..config import KEY_SIZE_BYTES, IDENTIFIER_LENGTH
from ..errors import DecodeError, EntropyError

_URLSAFE_ALPHABET = re.compile(r'^[A-Za-z0-9_-]*$')


def encode_identifier(seed: bytes) -> str:
    """
    Encode identifier bytes as unpadded URL-safe base64.

    Args:
        seed: Identifier bytes

    Returns:
        Encoded identifier
    """
    return base64.urlsafe_b64encode(seed).decode('ascii').rstrip('=')


def decode_identifier(text: str) -> bytes:
    """
    Decode an unpadded URL-safe base64 identifier.

    Args:
        text: Encoded identifier

    Returns:
        32 identifier bytes

    Raises:
        DecodeError: If text is not a valid encoded identifier
    """
    if not isinstance(text, str):
        raise DecodeError(f"Identifier must be a string, got {type(text).__name__}")

    if not _URLSAFE_ALPHABET.match(text):
        raise DecodeError(f"Error decoding ID: illegal base64 data in {text!r}")

    if len(text) % 4 == 1:
        raise DecodeError(f"Error decoding ID: invalid length {len(text)}")

    padded = text + '=' * (-len(text) % 4)
    try:
        seed = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Error decoding ID: {e}")

    # Reject non-canonical trailing bits
    if encode_identifier(seed) != text:
        raise DecodeError(f"Error decoding ID: non-canonical encoding {text!r}")

    if len(seed) != KEY_SIZE_BYTES:
        raise DecodeError(
            f"Error decoding ID: expected {KEY_SIZE_BYTES} bytes "
            f"({IDENTIFIER_LENGTH} characters), got {len(seed)}"
        )

    return seed


def generate_seed(read: Callable[[int], bytes] = os.urandom) -> bytes:
    """
    Read a fresh seed from the entropy source. Not retried.

    Args:
        read: Entropy source taking a byte count

    Returns:
        32 random bytes

    Raises:
        EntropyError: If the source fails or returns the wrong byte count
    """
    try:
        seed = read(KEY_SIZE_BYTES)
    except Exception as e:
        raise EntropyError(f"error generating random bytes: {e}")

    if seed is None or len(seed) != KEY_SIZE_BYTES:
        raise EntropyError("generated insufficient random bytes")

    return bytes(seed)
