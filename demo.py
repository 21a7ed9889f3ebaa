from wgconf import WireguardProvider

print("--- wgconf Live Demo ---")

# 1. Initialize Provider
provider = WireguardProvider()
print("[+] Provider initialized with default function library")

interface_template = """[Interface]
PrivateKey = ${private_key}
Address = ${cidrhost(subnet, index)}/32
ListenPort = ${port}"""

peer_template = """[Peer]
PublicKey = ${public_key}
AllowedIPs = ${cidrhost(subnet, index)}/32
Endpoint = ${host}:${port}"""

# 2. Create Peers
peers = []
for index, host in enumerate(["alpha.example.net", "beta.example.net", "gamma.example.net"], start=1):
    peer = provider.create_peer(
        interface_template=interface_template,
        peer_template=peer_template,
        vars={"subnet": "10.8.0.0/24", "index": index, "host": host, "port": 51820},
    )
    peers.append(peer)
    print(f"[+] Created Peer: {peer.public_key} ({host})")

# 3. Aggregate Config for the first peer
all_peers = [p.peer_rendered for p in peers]
config = provider.create_config(
    interface=peers[0].interface_rendered,
    peer=peers[0].peer_rendered,
    all_peers=all_peers,
)
print(f"[+] Aggregated Config: {config.id[:8]}...")
print(config.rendered)

# 4. Update without changes keeps state
unchanged = provider.update_config(config, all_peers=all_peers)
print(f"[+] Unchanged update keeps id: {unchanged.id == config.id}")

# 5. Plan a template change
planned = provider.plan_peer(peers[0], peer_template=peer_template + "\nPersistentKeepalive = 25")
print(f"[+] Template change recomputes: {sorted(planned)}")
print("--- Demo Complete ---")
