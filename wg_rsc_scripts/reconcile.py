from dataclasses import dataclass
from typing import List

from .routeros import PeerRecord
from .template import TemplateDefaults

HOST_SUFFIX = "/32"


@dataclass(frozen=True)
class ReconciledPeer:
    """Final field set for one client. Empty strings mean "leave the line out"."""

    listen_port: str
    private_key: str
    address: str
    dns: str
    public_key: str
    allowed_ips: str
    preshared_key: str
    endpoint: str

    @property
    def host(self) -> str:
        return ip_only(self.address)


def ip_only(addr: str) -> str:
    idx = addr.find("/")
    if idx > 0:
        return addr[:idx]
    return addr


def split_csv(value: str) -> List[str]:
    return [p.strip() for p in value.split(",")]


def reorder_allowed_ips(value: str) -> str:
    """Sort non-/32 entries and move /32 entries (in original order) to the end."""
    host_routes: List[str] = []
    others: List[str] = []
    for part in split_csv(value):
        if part.endswith(HOST_SUFFIX):
            host_routes.append(part)
        elif part:
            others.append(part)
    return ",".join(sorted(others) + host_routes)


def derive_allowed_ips(peer: PeerRecord, defaults: TemplateDefaults) -> str:
    if peer.allowed_address:
        allowed = peer.allowed_address
    elif defaults.allowed_ips_template:
        # a /32 in the template stands for "this client's own address"
        parts = [
            peer.client_address if part.endswith(HOST_SUFFIX) else part
            for part in split_csv(defaults.allowed_ips_template)
        ]
        allowed = ",".join(parts)
    else:
        allowed = peer.client_address
    return reorder_allowed_ips(allowed)


def coalesce(*values: str) -> str:
    for v in values:
        if v and v.strip():
            return v
    return ""


def reconcile(peer: PeerRecord, defaults: TemplateDefaults) -> ReconciledPeer:
    return ReconciledPeer(
        listen_port=defaults.listen_port,
        private_key=peer.private_key,
        address=peer.client_address,
        dns=coalesce(peer.client_dns, defaults.fallback_dns),
        # clients always trust the server key from the template, never their own
        public_key=defaults.server_public_key,
        allowed_ips=derive_allowed_ips(peer, defaults),
        preshared_key=peer.preshared_key,
        endpoint=f"{peer.endpoint_address}:{peer.endpoint_port}",
    )
