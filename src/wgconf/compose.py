"""
Composition of WireGuard configuration sections.

Peer sections are rendered from a seed's keypair plus templates;
interface documents aggregate one interface section with the sections
of every other peer.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .config import (
    PRIVATE_KEY_VAR,
    PUBLIC_KEY_VAR,
    INTERFACE_TEMPLATE_FIELD,
    PEER_TEMPLATE_FIELD,
    SECTION_SEPARATOR,
)
from .identity.keypair import KeyPair, derive
from .render.template import TemplateRenderer
from .render.validation import validate_vars
from .utils.hashing import hash_string


# Used when no renderer is passed; renderers are immutable once built
_DEFAULT_RENDERER = TemplateRenderer()


@dataclass(frozen=True)
class AggregatedConfig:
    """Rendered interface document and its content identity."""

    text: str
    identity: str


def build_context(keypair: KeyPair, variables: Mapping[str, str]) -> Dict[str, str]:
    """
    Build the template context for a keypair.

    Reserved key fields go in first; caller variables are merged over them.
    """
    context = {
        PRIVATE_KEY_VAR: keypair.get_private_b64(),
        PUBLIC_KEY_VAR: keypair.get_public_b64(),
    }
    context.update(variables)
    return context


def compose_peer(
    seed: bytes,
    interface_template: str,
    peer_template: str,
    variables: Optional[Mapping[str, Any]] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> Tuple[str, str]:
    """
    Render the interface and peer sections for one peer.

    Args:
        seed: 32-byte identifier
        interface_template: Template for the [Interface] section
        peer_template: Template for the [Peer] section
        variables: Caller variables (primitives only)
        renderer: Renderer to use (a default one if omitted)

    Returns:
        (interface_rendered, peer_rendered)

    Raises:
        ValidationError: If variables contain composite values
        RenderError: If either template fails; no partial result is returned
    """
    variables = validate_vars(variables)
    if renderer is None:
        renderer = _DEFAULT_RENDERER

    context = build_context(derive(seed), variables)

    interface_rendered = renderer.render(
        interface_template, context, field=INTERFACE_TEMPLATE_FIELD
    )
    peer_rendered = renderer.render(peer_template, context, field=PEER_TEMPLATE_FIELD)

    return interface_rendered, peer_rendered


def compose_interface(
    interface_section: str,
    self_peer_section: str,
    all_peer_sections: Sequence[str],
) -> AggregatedConfig:
    """
    Aggregate an interface section with peer sections.

    Entries textually equal to ``self_peer_section`` are skipped so a peer
    never appears in its own config. Order of the remaining entries is kept.

    Args:
        interface_section: Rendered interface section
        self_peer_section: This peer's own rendered peer section
        all_peer_sections: Candidate peer sections

    Returns:
        AggregatedConfig with the text and its SHA-256 identity
    """
    parts = [interface_section + SECTION_SEPARATOR]
    for entry in all_peer_sections:
        if entry != self_peer_section:
            parts.append(entry + SECTION_SEPARATOR)

    text = "".join(parts)
    return AggregatedConfig(text=text, identity=hash_string(text))
