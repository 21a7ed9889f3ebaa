"""
Tests for the peer and config lifecycle.
"""

from dataclasses import replace

import pytest

from wgconf import WireguardProvider, PeerState, ConfigState, encode_identifier, clamp
from wgconf.errors import (
    DecodeError,
    EntropyError,
    TemplateEvaluationError,
    ValidationError,
)
from wgconf.resources import (
    create_peer,
    read_peer,
    update_peer,
    import_peer,
    plan_peer,
    create_config,
    read_config,
    update_config,
    plan_config,
)

INTERFACE_TEMPLATE = "[Interface]\nPrivateKey = ${private_key}\nAddress = ${address}"
PEER_TEMPLATE = "[Peer]\nPublicKey = ${public_key}\nAllowedIPs = ${address}"


def fixed_entropy(byte):
    """Entropy source returning a constant byte."""
    return lambda n: bytes([byte]) * n


class TestPeerLifecycle:
    """Test creating, reading and updating peers."""
    
    def test_create_peer(self):
        """Test that a created peer has keys and rendered sections."""
        state = create_peer(
            INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "10.0.0.1/32"},
            entropy=fixed_entropy(0xFF),
        )
        
        assert state.id == encode_identifier(clamp(b"\xff" * 32))
        assert len(state.id) == 43
        assert len(state.private_key) == 44
        assert len(state.public_key) == 44
        assert state.private_key in state.interface_rendered
        assert state.public_key in state.peer_rendered
        assert state.vars == {"address": "10.0.0.1/32"}
    
    def test_create_without_templates(self):
        """Test that templates and vars are optional."""
        state = create_peer()
        
        assert state.interface_rendered == ""
        assert state.peer_rendered == ""
        assert state.vars == {}
    
    def test_create_entropy_failure(self):
        """Test that entropy failure aborts creation."""
        with pytest.raises(EntropyError):
            create_peer(entropy=lambda n: b"")
    
    def test_create_render_failure(self):
        """Test that template errors abort creation."""
        with pytest.raises(TemplateEvaluationError):
            create_peer(peer_template="${nope}")
    
    def test_read_is_idempotent(self):
        """Test that reading re-derives the same keys and sections."""
        state = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
        
        assert read_peer(state) == state
    
    def test_read_rejects_bad_id(self):
        """Test that a malformed stored id is rejected."""
        with pytest.raises(DecodeError):
            read_peer(PeerState(id="not a valid id"))
    
    def test_update_without_changes_keeps_state(self):
        """Test that unchanged inputs do not trigger recomputation."""
        state = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
        
        updated = update_peer(
            state,
            interface_template=INTERFACE_TEMPLATE,
            peer_template=PEER_TEMPLATE,
            vars={"address": "a"},
        )
        
        assert updated is state
    
    def test_update_equivalent_vars_keeps_state(self):
        """Test that vars are compared after string serialization."""
        state = create_peer(vars={"port": 51820})
        
        assert update_peer(state, vars={"port": "51820"}) is state
    
    def test_update_vars_rerenders(self):
        """Test that changed vars re-render both sections."""
        state = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
        
        updated = update_peer(state, vars={"address": "b"})
        
        assert updated.id == state.id
        assert updated.public_key == state.public_key
        assert updated.interface_rendered.endswith("Address = b")
        assert updated.peer_rendered.endswith("AllowedIPs = b")
    
    def test_update_failure_leaves_state(self):
        """Test that a failed update raises and the old state is intact."""
        state = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
        
        with pytest.raises(TemplateEvaluationError):
            update_peer(state, peer_template="${missing}")
        
        assert state.peer_template == PEER_TEMPLATE
    
    def test_update_unknown_attribute(self):
        """Test that unknown attributes are rejected."""
        state = create_peer()
        
        with pytest.raises(ValidationError, match="private_key"):
            update_peer(state, private_key="x")
    
    def test_create_non_string_template(self):
        """Test that non-string templates are validation errors."""
        with pytest.raises(ValidationError, match="peer_template"):
            create_peer(peer_template=5)
    
    def test_update_non_string_template(self):
        """Test that updates with non-string templates are rejected."""
        state = create_peer()
        
        with pytest.raises(ValidationError, match="interface_template"):
            update_peer(state, interface_template=["[Interface]"])
        with pytest.raises(ValidationError, match="peer_template"):
            plan_peer(state, peer_template=b"[Peer]")
    
    def test_import_peer(self):
        """Test importing a peer by identifier."""
        original = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
        
        imported = import_peer(original.id)
        
        assert imported.id == original.id
        assert imported.private_key == original.private_key
        assert imported.public_key == original.public_key
        assert imported.interface_template == ""
    
    def test_import_rejects_bad_identifier(self):
        """Test that a malformed identifier is rejected on import."""
        with pytest.raises(DecodeError):
            import_peer("A" * 42 + "=")
    
    def test_to_dict(self):
        """Test dictionary export of a peer."""
        state = create_peer(vars={"a": "b"})
        data = state.to_dict()
        
        assert data['id'] == state.id
        assert data['vars'] == {"a": "b"}
        assert set(data) == {
            'id', 'private_key', 'public_key', 'interface_template',
            'peer_template', 'vars', 'interface_rendered', 'peer_rendered',
        }


class TestPeerPlan:
    """Test which computed peer fields a change invalidates."""
    
    def setup_method(self):
        self.state = create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": "a"})
    
    def test_no_change(self):
        """Test that identical inputs invalidate nothing."""
        assert plan_peer(self.state, peer_template=PEER_TEMPLATE) == frozenset()
    
    def test_interface_template_change(self):
        """Test that the interface template only affects its section."""
        planned = plan_peer(self.state, interface_template="x")
        
        assert planned == {"interface_rendered"}
    
    def test_peer_template_change(self):
        """Test that the peer template only affects its section."""
        planned = plan_peer(self.state, peer_template="x")
        
        assert planned == {"peer_rendered"}
    
    def test_vars_change(self):
        """Test that vars affect both sections."""
        planned = plan_peer(self.state, vars={"address": "b"})
        
        assert planned == {"interface_rendered", "peer_rendered"}


class TestConfigLifecycle:
    """Test aggregated config lifecycle."""
    
    def test_create_config(self):
        """Test that the config id is the content identity."""
        state = create_config("IFACE", "PEER_A", ["PEER_A", "PEER_B"])
        
        assert state.rendered == "IFACE\n\nPEER_B\n\n"
        assert len(state.id) == 64
        assert state.all_peers == ("PEER_A", "PEER_B")
    
    def test_create_defaults(self):
        """Test config with no inputs."""
        state = create_config()
        
        assert state.rendered == "\n\n"
    
    def test_read_is_idempotent(self):
        """Test that re-reading gives the same id."""
        state = create_config("I", "P", ["P", "Q"])
        
        assert read_config(state) == state
    
    def test_update_without_changes_keeps_state(self):
        """Test that unchanged inputs do not re-aggregate."""
        state = create_config("I", "P", ["P", "Q"])
        
        assert update_config(state, all_peers=["P", "Q"], interface="I") is state
    
    def test_update_changes_id(self):
        """Test that a changed input gives a new id."""
        state = create_config("I", "P", ["P", "Q"])
        
        updated = update_config(state, all_peers=["P", "Q", "R"])
        
        assert updated.rendered == "I\n\nQ\n\nR\n\n"
        assert updated.id != state.id
    
    def test_non_string_peer_rejected(self):
        """Test that all_peers entries must be strings."""
        with pytest.raises(ValidationError, match="1"):
            create_config("I", "P", ["P", 3])
    
    def test_non_string_sections_rejected(self):
        """Test that interface and peer must be strings."""
        with pytest.raises(ValidationError, match="interface: must be a string, got int"):
            create_config(interface=1)
        with pytest.raises(ValidationError, match="peer"):
            update_config(create_config(), peer=b"P")
    
    def test_plan(self):
        """Test planning for config changes."""
        state = create_config("I", "P", ["P", "Q"])
        
        assert plan_config(state, peer="P") == frozenset()
        assert plan_config(state, peer="Q") == {"rendered"}
        assert plan_config(state, all_peers=["Q", "P"]) == {"rendered"}
    
    def test_unknown_attribute(self):
        """Test that unknown config attributes are rejected."""
        with pytest.raises(ValidationError):
            update_config(create_config(), rendered="x")


class TestWireguardProvider:
    """Test the provider facade."""
    
    def test_mesh_configs(self):
        """Test building configs for a three-peer mesh."""
        provider = WireguardProvider()
        peers = [
            provider.create_peer(INTERFACE_TEMPLATE, PEER_TEMPLATE, {"address": f"10.0.0.{i}/32"})
            for i in range(1, 4)
        ]
        all_peers = [p.peer_rendered for p in peers]
        
        configs = [
            provider.create_config(p.interface_rendered, p.peer_rendered, all_peers)
            for p in peers
        ]
        
        for peer, config in zip(peers, configs):
            assert peer.peer_rendered not in config.rendered
            assert config.rendered.startswith(peer.interface_rendered + "\n\n")
            others = [p for p in peers if p is not peer]
            for other in others:
                assert other.peer_rendered in config.rendered
        
        assert len({c.id for c in configs}) == 3
    
    def test_injected_functions(self):
        """Test that the provider passes its function library to rendering."""
        provider = WireguardProvider(functions={"wrap": lambda s: f"[{s}]"})
        
        state = provider.create_peer(peer_template="${wrap(name)}", vars={"name": "x"})
        
        assert state.peer_rendered == "[x]"
    
    def test_injected_entropy(self):
        """Test that the provider uses its entropy source."""
        provider = WireguardProvider(entropy=fixed_entropy(0x00))
        
        state = provider.create_peer()
        
        assert state.id == encode_identifier(clamp(b"\x00" * 32))
    
    def test_update_peer_same_object(self):
        """Test that unchanged updates return the stored state."""
        provider = WireguardProvider()
        state = provider.create_peer(vars={"a": "b"})
        
        assert provider.update_peer(state, vars={"a": "b"}) is state
    
    def test_keypair_for_identifier(self):
        """Test deriving the keypair for a stored peer."""
        provider = WireguardProvider()
        state = provider.create_peer()
        
        assert provider.keypair(state.id).get_public_b64() == state.public_key
    
    def test_import_peer(self):
        """Test importing through the provider."""
        provider = WireguardProvider()
        state = provider.create_peer()
        
        assert provider.import_peer(state.id).public_key == state.public_key
    
    def test_read_and_update_config(self):
        """Test config read and update through the provider."""
        provider = WireguardProvider()
        state = provider.create_config("I", "P", ["P", "Q"])
        
        assert provider.read_config(state) == state
        assert provider.update_config(state, interface="J").rendered == "J\n\nQ\n\n"
        assert provider.plan_config(state, interface="J") == {"rendered"}
    
    def test_plan_peer(self):
        """Test peer planning through the provider."""
        provider = WireguardProvider()
        state = provider.create_peer()
        
        assert provider.plan_peer(state, vars={"x": "y"}) == {
            "interface_rendered", "peer_rendered",
        }
    
    def test_tampered_state_detected(self):
        """Test that invariant checks catch inconsistent stored keys."""
        from wgconf.errors import InvariantViolationError
        
        provider = WireguardProvider()
        state = provider.create_peer()
        other = provider.create_peer()
        tampered = replace(state, public_key=other.public_key)
        
        with pytest.raises(InvariantViolationError):
            provider._checked_peer(tampered)
        
        # A read re-derives the keys from the id
        assert provider.read_peer(tampered).public_key == state.public_key
    
    def test_tampered_config_detected(self):
        """Test that invariant checks catch a wrong config id."""
        from wgconf.errors import InvariantViolationError
        
        provider = WireguardProvider()
        state = provider.create_config("I", "P", ["Q"])
        
        with pytest.raises(InvariantViolationError):
            provider._checked_config(replace(state, id="0" * 64))
        
        assert isinstance(state, ConfigState)
