"""Key derivation and identifiers for wgconf."""

from .keypair import KeyPair, clamp, derive
from .identifier import encode_identifier, decode_identifier, generate_seed

__all__ = [
    'KeyPair',
    'clamp',
    'derive',
    'encode_identifier',
    'decode_identifier',
    'generate_seed',
]
