"""
Peer resource lifecycle.

A peer is identified by its seed. Keys are re-derived on every read and
the rendered sections are recomputed only when a template or the
variables change.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from ..compose import compose_peer
from ..config import INTERFACE_TEMPLATE_FIELD, PEER_TEMPLATE_FIELD
from ..errors import ValidationError
from ..identity.identifier import decode_identifier, encode_identifier, generate_seed
from ..identity.keypair import clamp, derive
from ..render.template import TemplateRenderer
from ..render.validation import validate_vars

logger = logging.getLogger(__name__)

PEER_INPUTS = frozenset([INTERFACE_TEMPLATE_FIELD, PEER_TEMPLATE_FIELD, "vars"])

# Computed field -> inputs whose change makes it unknown
PEER_COMPUTED_IF = {
    "interface_rendered": frozenset([INTERFACE_TEMPLATE_FIELD, "vars"]),
    "peer_rendered": frozenset([PEER_TEMPLATE_FIELD, "vars"]),
}


@dataclass(frozen=True)
class PeerState:
    """Stored attributes of a peer."""

    id: str
    private_key: str = ""
    public_key: str = ""
    interface_template: str = ""
    peer_template: str = ""
    vars: Dict[str, str] = field(default_factory=dict)
    interface_rendered: str = ""
    peer_rendered: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'private_key': self.private_key,
            'public_key': self.public_key,
            'interface_template': self.interface_template,
            'peer_template': self.peer_template,
            'vars': dict(self.vars),
            'interface_rendered': self.interface_rendered,
            'peer_rendered': self.peer_rendered,
        }


def _normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(changes) - PEER_INPUTS)
    if unknown:
        raise ValidationError(f"unknown peer attribute(s): {', '.join(unknown)}")

    normalized = dict(changes)
    if "vars" in normalized:
        normalized["vars"] = validate_vars(normalized["vars"])
    for name in (INTERFACE_TEMPLATE_FIELD, PEER_TEMPLATE_FIELD):
        if name in normalized and normalized[name] is None:
            normalized[name] = ""

    bad = sorted(
        name for name in (INTERFACE_TEMPLATE_FIELD, PEER_TEMPLATE_FIELD)
        if name in normalized and not isinstance(normalized[name], str)
    )
    if bad:
        raise ValidationError(f"attributes must be strings: {', '.join(bad)}")
    return normalized


def _changed_inputs(state: PeerState, changes: Mapping[str, Any]) -> FrozenSet[str]:
    return frozenset(
        name for name, value in changes.items() if getattr(state, name) != value
    )


def plan_peer(state: PeerState, **changes: Any) -> FrozenSet[str]:
    """
    Computed fields that a change would make unknown.

    Args:
        state: Current peer state
        **changes: New values for interface_template, peer_template or vars

    Returns:
        Set of computed field names to be recomputed
    """
    changed = _changed_inputs(state, _normalize_changes(changes))
    return frozenset(
        name for name, inputs in PEER_COMPUTED_IF.items() if inputs & changed
    )


def read_peer(
    state: PeerState,
    renderer: Optional[TemplateRenderer] = None,
) -> PeerState:
    """
    Re-derive keys and render both sections from the stored inputs.

    Raises:
        DecodeError: If the stored id is not a valid identifier
        ValidationError: If vars contain composite values
        RenderError: If a template fails
    """
    seed = decode_identifier(state.id)
    keypair = derive(seed)

    interface_rendered, peer_rendered = compose_peer(
        seed,
        state.interface_template,
        state.peer_template,
        state.vars,
        renderer=renderer,
    )

    return replace(
        state,
        private_key=keypair.get_private_b64(),
        public_key=keypair.get_public_b64(),
        interface_rendered=interface_rendered,
        peer_rendered=peer_rendered,
    )


def create_peer(
    interface_template: str = "",
    peer_template: str = "",
    vars: Optional[Mapping[str, Any]] = None,
    renderer: Optional[TemplateRenderer] = None,
    entropy: Callable[[int], bytes] = os.urandom,
) -> PeerState:
    """
    Create a peer with a fresh seed.

    Raises:
        EntropyError: If the entropy source fails
        ValidationError: If vars contain composite values or a template is not a string
        RenderError: If a template fails
    """
    inputs = _normalize_changes({
        INTERFACE_TEMPLATE_FIELD: interface_template,
        PEER_TEMPLATE_FIELD: peer_template,
        "vars": vars,
    })
    seed = clamp(generate_seed(entropy))
    state = PeerState(id=encode_identifier(seed), **inputs)

    state = read_peer(state, renderer=renderer)
    logger.debug("created peer %s", state.public_key)
    return state


def import_peer(
    identifier: str,
    renderer: Optional[TemplateRenderer] = None,
) -> PeerState:
    """
    Adopt an existing identifier as a peer with empty templates.

    Raises:
        DecodeError: If the identifier is malformed
    """
    decode_identifier(identifier)
    return read_peer(PeerState(id=identifier), renderer=renderer)


def update_peer(
    state: PeerState,
    renderer: Optional[TemplateRenderer] = None,
    **changes: Any,
) -> PeerState:
    """
    Apply input changes, recomputing rendered sections only when needed.

    Returns:
        The same state object when nothing relevant changed, otherwise a
        new re-rendered state
    """
    normalized = _normalize_changes(changes)
    changed = _changed_inputs(state, normalized)
    if not changed:
        logger.debug("peer %s unchanged, keeping rendered sections", state.public_key)
        return state

    logger.debug(
        "peer %s changed (%s), re-rendering", state.public_key, ", ".join(sorted(changed))
    )
    return read_peer(replace(state, **normalized), renderer=renderer)
