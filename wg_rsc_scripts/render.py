from typing import List, Tuple

from .reconcile import ReconciledPeer

CRLF = "\r\n"
DEFAULT_WIREGUARD_DIR = "C:\\Program Files\\WireGuard"


def _interface_fields(p: ReconciledPeer) -> List[Tuple[str, str]]:
    return [
        ("ListenPort", p.listen_port),
        ("PrivateKey", p.private_key),
        ("Address", p.address),
        ("DNS", p.dns),
    ]


def _peer_fields(p: ReconciledPeer) -> List[Tuple[str, str]]:
    return [
        ("PublicKey", p.public_key),
        ("AllowedIPs", p.allowed_ips),
        ("PresharedKey", p.preshared_key),
        ("Endpoint", p.endpoint),
    ]


def render_install_script(p: ReconciledPeer, wireguard_dir: str = DEFAULT_WIREGUARD_DIR) -> str:
    """Render a Windows batch script that writes ``<host>.conf`` and installs it as a tunnel service."""
    if not p.host:
        raise ValueError("peer has no address")
    conf = f"{p.host}.conf"
    wg_dir = wireguard_dir.rstrip("\\")

    lines: List[str] = [f"echo [Interface] > {conf}"]
    for key, val in _interface_fields(p):
        if val:
            lines.append(f"echo {key} = {val} >> {conf}")
    lines.append(f"echo. >> {conf}")
    lines.append(f"echo [Peer] >> {conf}")
    for key, val in _peer_fields(p):
        if val:
            lines.append(f"echo {key} = {val} >> {conf}")

    lines.append(f'move /y {conf} "{wg_dir}\\"')
    lines.append(f'"{wg_dir}\\wireguard.exe" /installtunnelservice "{wg_dir}\\{conf}"')
    return "".join(line + CRLF for line in lines)


def render_client_conf(p: ReconciledPeer) -> str:
    """Plain tunnel config text, same content the install script produces."""
    lines: List[str] = ["[Interface]\n"]
    for key, val in _interface_fields(p):
        if val:
            lines.append(f"{key} = {val}\n")
    lines.append("\n[Peer]\n")
    for key, val in _peer_fields(p):
        if val:
            lines.append(f"{key} = {val}\n")
    return "".join(lines)
