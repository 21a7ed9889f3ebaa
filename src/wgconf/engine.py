"""
wgconf Public API - WireGuard configuration derivation

This is the main entry point for hosts managing peers and configs.
Every rendering flows through the provider's configured renderer.
"""

import os
from typing import Any, Callable, FrozenSet, Mapping, Optional, Sequence

from .identity.identifier import decode_identifier
from .identity.keypair import KeyPair, derive
from .render.template import TemplateRenderer
from .resources import peer as peer_resource
from .resources import config as config_resource
from .resources.peer import PeerState
from .resources.config import ConfigState
from .invariants import check_peer_invariants, check_config_invariants


class WireguardProvider:
    """
    Main provider for WireGuard peers and aggregated configs.

    This is the primary interface for:
    - Creating, reading, updating and importing peers
    - Aggregating interface configs
    - Planning which computed fields a change invalidates
    """

    def __init__(
        self,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
        entropy: Callable[[int], bytes] = os.urandom,
        check_invariants: bool = True,
    ):
        """
        Initialize provider.

        Args:
            functions: Function library for templates (default library if None)
            entropy: Entropy source used when creating peers
            check_invariants: Verify key and identity invariants after each read
        """
        self.renderer = TemplateRenderer(functions)
        self.entropy = entropy
        self.check_invariants = check_invariants

    # ==================== Keys ====================

    def keypair(self, identifier: str) -> KeyPair:
        """
        Derive the keypair for an identifier.

        Raises:
            DecodeError: If identifier is malformed
        """
        return derive(decode_identifier(identifier))

    # ==================== Peers ====================

    def create_peer(
        self,
        interface_template: str = "",
        peer_template: str = "",
        vars: Optional[Mapping[str, Any]] = None,
    ) -> PeerState:
        """
        Create a peer with a fresh identifier.

        Returns:
            New peer state

        Raises:
            EntropyError: If random bytes cannot be read
            ValidationError: If vars contain lists or maps
            RenderError: If a template fails to render
        """
        state = peer_resource.create_peer(
            interface_template=interface_template,
            peer_template=peer_template,
            vars=vars,
            renderer=self.renderer,
            entropy=self.entropy,
        )
        return self._checked_peer(state)

    def read_peer(self, state: PeerState) -> PeerState:
        """Refresh a peer from its stored inputs."""
        return self._checked_peer(peer_resource.read_peer(state, renderer=self.renderer))

    def update_peer(self, state: PeerState, **changes: Any) -> PeerState:
        """
        Update peer inputs.

        Args:
            state: Current peer state
            **changes: interface_template, peer_template and/or vars

        Returns:
            Updated peer state (the same object if nothing changed)
        """
        updated = peer_resource.update_peer(state, renderer=self.renderer, **changes)
        if updated is state:
            return state
        return self._checked_peer(updated)

    def import_peer(self, identifier: str) -> PeerState:
        """
        Import an existing peer by identifier.

        Raises:
            DecodeError: If identifier is malformed
        """
        return self._checked_peer(peer_resource.import_peer(identifier, renderer=self.renderer))

    def plan_peer(self, state: PeerState, **changes: Any) -> FrozenSet[str]:
        """Computed peer fields a change would invalidate."""
        return peer_resource.plan_peer(state, **changes)

    # ==================== Configs ====================

    def create_config(
        self,
        interface: str = "",
        peer: str = "",
        all_peers: Optional[Sequence[str]] = None,
    ) -> ConfigState:
        """
        Aggregate an interface config.

        Args:
            interface: Rendered interface section
            peer: This peer's own rendered peer section (excluded)
            all_peers: Rendered peer sections of every peer

        Returns:
            Config state whose id is the SHA-256 of the rendered text
        """
        state = config_resource.create_config(interface, peer, all_peers)
        return self._checked_config(state)

    def read_config(self, state: ConfigState) -> ConfigState:
        """Re-aggregate a config from its stored inputs."""
        return self._checked_config(config_resource.read_config(state))

    def update_config(self, state: ConfigState, **changes: Any) -> ConfigState:
        """
        Update config inputs.

        Returns:
            Updated config state (the same object if nothing changed)
        """
        updated = config_resource.update_config(state, **changes)
        if updated is state:
            return state
        return self._checked_config(updated)

    def plan_config(self, state: ConfigState, **changes: Any) -> FrozenSet[str]:
        """Computed config fields a change would invalidate."""
        return config_resource.plan_config(state, **changes)

    # ==================== Internals ====================

    def _checked_peer(self, state: PeerState) -> PeerState:
        if self.check_invariants:
            check_peer_invariants(state)
        return state

    def _checked_config(self, state: ConfigState) -> ConfigState:
        if self.check_invariants:
            check_config_invariants(state)
        return state
