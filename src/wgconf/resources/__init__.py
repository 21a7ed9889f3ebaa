"""Resource lifecycle for peers and aggregated configs."""

from .peer import (
    PeerState,
    create_peer,
    read_peer,
    update_peer,
    import_peer,
    plan_peer,
)
from .config import (
    ConfigState,
    create_config,
    read_config,
    update_config,
    plan_config,
)

__all__ = [
    'PeerState',
    'create_peer',
    'read_peer',
    'update_peer',
    'import_peer',
    'plan_peer',
    'ConfigState',
    'create_config',
    'read_config',
    'update_config',
    'plan_config',
]
