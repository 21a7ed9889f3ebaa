"""
Runtime invariant validation.
These checks ensure derived keys and aggregated configs stay consistent
with the inputs they were computed from.
"""

import base64
import binascii

from .config import (
    KEY_SIZE_BYTES,
    ENCODED_KEY_LENGTH,
    IDENTITY_LENGTH,
    CLAMP_LOW_MASK,
    CLAMP_HIGH_BIT,
)
from .errors import InvariantViolationError, DecodeError
from .identity.identifier import decode_identifier
from .identity.keypair import derive
from .resources.peer import PeerState
from .resources.config import ConfigState
from .utils.hashing import hash_string, verify_hash


def _decode_key(name: str, encoded: str) -> bytes:
    if len(encoded) != ENCODED_KEY_LENGTH:
        raise InvariantViolationError(
            f"{name} must be {ENCODED_KEY_LENGTH} characters, got {len(encoded)}"
        )
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvariantViolationError(f"{name} is not valid base64: {e}")


def validate_clamped(private: bytes):
    """
    Validate X25519 clamping of a private scalar.

    Args:
        private: 32-byte private scalar

    Raises:
        InvariantViolationError: If the scalar is not clamped
    """
    if len(private) != KEY_SIZE_BYTES:
        raise InvariantViolationError(
            f"Private key must be {KEY_SIZE_BYTES} bytes, got {len(private)}"
        )

    if private[0] & ~CLAMP_LOW_MASK & 0xFF:
        raise InvariantViolationError("Private key low bits are not cleared")

    if private[31] & 0x80:
        raise InvariantViolationError("Private key top bit is set")

    if not private[31] & CLAMP_HIGH_BIT:
        raise InvariantViolationError("Private key second-highest bit is not set")


def validate_key_binding(private: bytes, public: bytes):
    """
    Validate that the public key is the base-point multiple of the private key.

    Raises:
        InvariantViolationError: If the keys do not match
    """
    expected = derive(private).public
    if public != expected:
        raise InvariantViolationError("Public key not derived from private key")


def validate_identifier_binding(identifier: str, private: bytes):
    """
    Validate that a peer's private key is derived from its identifier.

    Raises:
        InvariantViolationError: If the identifier does not match
    """
    try:
        seed = decode_identifier(identifier)
    except DecodeError as e:
        raise InvariantViolationError(f"Peer id is not a valid identifier: {e}")

    if derive(seed).private != private:
        raise InvariantViolationError("Private key not derived from peer id")


def validate_aggregate_identity(text: str, identity: str):
    """
    Validate that a config identity is the hash of its text.

    Raises:
        InvariantViolationError: If identity does not match
    """
    if len(identity) != IDENTITY_LENGTH:
        raise InvariantViolationError(
            f"Config identity must be {IDENTITY_LENGTH} characters, got {len(identity)}"
        )

    if not verify_hash(text, identity):
        raise InvariantViolationError(
            f"Config identity {identity} does not match rendered text. "
            f"Expected {hash_string(text)}"
        )


def check_peer_invariants(state: PeerState):
    """
    Check all applicable invariants for a peer state.

    Raises:
        InvariantViolationError: If any invariant is violated
    """
    private = _decode_key("private_key", state.private_key)
    public = _decode_key("public_key", state.public_key)
    validate_clamped(private)
    validate_key_binding(private, public)
    validate_identifier_binding(state.id, private)


def check_config_invariants(state: ConfigState):
    """
    Check all applicable invariants for a config state.

    Raises:
        InvariantViolationError: If any invariant is violated
    """
    validate_aggregate_identity(state.rendered, state.id)
