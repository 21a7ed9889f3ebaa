"""
X25519 keypair derivation.
Keys are derived from the identifier on every read and never stored.
"""

import base64

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives import serialization

from ..config import (
    KEY_SIZE_BYTES,
    CLAMP_LOW_MASK,
    CLAMP_HIGH_MASK,
    CLAMP_HIGH_BIT,
)
from ..errors import KeypairError


def clamp(seed: bytes) -> bytes:
    """
    Apply X25519 clamping to a copy of the seed.

    Args:
        seed: 32 raw bytes

    Returns:
        Clamped 32-byte scalar

    Raises:
        KeypairError: If seed is not 32 bytes
    """
    if len(seed) != KEY_SIZE_BYTES:
        raise KeypairError(f"Seed must be {KEY_SIZE_BYTES} bytes, got {len(seed)}")

    scalar = bytearray(seed)
    scalar[0] &= CLAMP_LOW_MASK
    scalar[31] &= CLAMP_HIGH_MASK
    scalar[31] |= CLAMP_HIGH_BIT
    return bytes(scalar)


class KeyPair:
    """
    Clamped X25519 private scalar and its public point.
    """

    def __init__(self, private_bytes: bytes):
        """
        Initialize keypair from a clamped private scalar.

        Args:
            private_bytes: 32-byte clamped scalar
        """
        if clamp(private_bytes) != private_bytes:
            raise KeypairError("Private key must be clamped")

        self._private_bytes = private_bytes
        private_key = X25519PrivateKey.from_private_bytes(private_bytes)
        self._public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def from_seed(cls, seed: bytes) -> 'KeyPair':
        """
        Derive a keypair from a 32-byte seed.

        Args:
            seed: 32-byte seed (clamped or not)

        Returns:
            KeyPair instance

        Raises:
            KeypairError: If seed is not 32 bytes
        """
        return cls(clamp(seed))

    @property
    def private(self) -> bytes:
        """Clamped 32-byte private scalar."""
        return self._private_bytes

    @property
    def public(self) -> bytes:
        """32-byte public key."""
        return self._public_bytes

    def get_private_b64(self) -> str:
        """
        Export private key as standard padded base64.
        WARNING: Handle with extreme care.

        Returns:
            44-character base64 string
        """
        return base64.b64encode(self._private_bytes).decode('ascii')

    def get_public_b64(self) -> str:
        """
        Export public key as standard padded base64.

        Returns:
            44-character base64 string
        """
        return base64.b64encode(self._public_bytes).decode('ascii')

    def __eq__(self, other):
        if not isinstance(other, KeyPair):
            return NotImplemented
        return self._private_bytes == other._private_bytes

    def __hash__(self):
        return hash(self._private_bytes)

    def __repr__(self):
        return f"KeyPair(public={self.get_public_b64()!r})"


def derive(seed: bytes) -> KeyPair:
    """Derive the keypair for a seed. Deterministic for a given seed."""
    return KeyPair.from_seed(seed)
