"""
wgconf - WireGuard configuration derivation

Derives X25519 keypairs from opaque identifiers, renders interface and
peer sections from templates, and aggregates peer sections into one
interface config with a content-hash identity.

Main exports:
- WireguardProvider: Peer and config lifecycle
- KeyPair: X25519 keypair derivation
- TemplateRenderer: ${...} template rendering
- compose_peer / compose_interface: Pure composition functions
"""

from .engine import WireguardProvider
from .identity import (
    KeyPair,
    clamp,
    derive,
    encode_identifier,
    decode_identifier,
    generate_seed,
)
from .render import TemplateRenderer, validate_vars, default_functions
from .compose import AggregatedConfig, compose_peer, compose_interface
from .resources import PeerState, ConfigState
from .errors import *

__version__ = "0.1.0"

__all__ = [
    'WireguardProvider',
    'KeyPair',
    'clamp',
    'derive',
    'encode_identifier',
    'decode_identifier',
    'generate_seed',
    'TemplateRenderer',
    'validate_vars',
    'default_functions',
    'AggregatedConfig',
    'compose_peer',
    'compose_interface',
    'PeerState',
    'ConfigState',
]
