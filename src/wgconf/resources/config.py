"""
Aggregated config resource lifecycle.
The id of a config is the SHA-256 of its rendered text.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

from ..compose import compose_interface
from ..errors import ValidationError

logger = logging.getLogger(__name__)

CONFIG_INPUTS = frozenset(["interface", "peer", "all_peers"])

CONFIG_COMPUTED_IF = {
    "rendered": CONFIG_INPUTS,
}


@dataclass(frozen=True)
class ConfigState:
    """Stored attributes of an aggregated config."""

    id: str = ""
    interface: str = ""
    peer: str = ""
    all_peers: Tuple[str, ...] = ()
    rendered: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'interface': self.interface,
            'peer': self.peer,
            'all_peers': list(self.all_peers),
            'rendered': self.rendered,
        }


def _normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(changes) - CONFIG_INPUTS)
    if unknown:
        raise ValidationError(f"unknown config attribute(s): {', '.join(unknown)}")

    normalized = {}
    for name, value in changes.items():
        if name == "all_peers":
            value = tuple(value or ())
            bad = [i for i, entry in enumerate(value) if not isinstance(entry, str)]
            if bad:
                raise ValidationError(
                    f"all_peers: entries must be strings; bad indexes: "
                    f"{', '.join(str(i) for i in bad)}"
                )
        elif value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValidationError(
                f"{name}: must be a string, got {type(value).__name__}"
            )
        normalized[name] = value
    return normalized


def _changed_inputs(state: ConfigState, changes: Mapping[str, Any]) -> FrozenSet[str]:
    return frozenset(
        name for name, value in changes.items() if getattr(state, name) != value
    )


def plan_config(state: ConfigState, **changes: Any) -> FrozenSet[str]:
    """
    Computed fields that a change would make unknown.

    Args:
        state: Current config state
        **changes: New values for interface, peer or all_peers

    Returns:
        ``{"rendered"}`` if any input changes, else an empty set
    """
    changed = _changed_inputs(state, _normalize_changes(changes))
    return frozenset(
        name for name, inputs in CONFIG_COMPUTED_IF.items() if inputs & changed
    )


def read_config(state: ConfigState) -> ConfigState:
    """Aggregate the stored sections and set id to the content identity."""
    aggregated = compose_interface(state.interface, state.peer, state.all_peers)
    return replace(state, id=aggregated.identity, rendered=aggregated.text)


def create_config(
    interface: str = "",
    peer: str = "",
    all_peers: Optional[Sequence[str]] = None,
) -> ConfigState:
    """
    Create an aggregated config.

    Raises:
        ValidationError: If an input or an all_peers entry is not a string
    """
    inputs = _normalize_changes({
        "interface": interface,
        "peer": peer,
        "all_peers": all_peers,
    })
    state = read_config(ConfigState(**inputs))
    logger.debug("created config %s", state.id)
    return state


def update_config(state: ConfigState, **changes: Any) -> ConfigState:
    """
    Apply input changes, re-aggregating only when needed.

    Returns:
        The same state object when nothing changed, otherwise a new state
        with a new id
    """
    normalized = _normalize_changes(changes)
    changed = _changed_inputs(state, normalized)
    if not changed:
        logger.debug("config %s unchanged", state.id)
        return state

    new_state = read_config(replace(state, **normalized))
    logger.debug("config %s re-rendered as %s", state.id, new_state.id)
    return new_state
