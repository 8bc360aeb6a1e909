from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .routeros import split_lines

PEER_SECTION = "[peer]"
COMMENT_PREFIXES = ("#", ";")


class MissingRequiredField(ValueError):
    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"template missing required field: {field}")


@dataclass(frozen=True)
class TemplateDefaults:
    """Values shared by every generated client, taken from a known-good client config."""

    server_public_key: str
    listen_port: str = ""
    fallback_dns: str = ""
    allowed_ips_template: str = ""


def split_kv(line: str) -> Optional[Tuple[str, str]]:
    key, sep, val = line.partition("=")
    if not sep:
        return None
    return key.strip(), val.strip()


def parse_template_lines(lines: Iterable[str]) -> TemplateDefaults:
    listen_port = ""
    dns = ""
    public_key = ""
    allowed_ips = ""
    in_peer = False

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        if line.startswith("["):
            in_peer = line.lower() == PEER_SECTION
            continue
        kv = split_kv(line)
        if kv is None:
            continue
        key, val = kv
        key = key.lower()
        if key == "listenport":
            listen_port = val
        elif key == "dns":
            dns = val
        # PublicKey/AllowedIPs only count inside [Peer]; [Interface] may carry its own
        elif key == "publickey" and in_peer:
            public_key = val
        elif key == "allowedips" and in_peer:
            allowed_ips = val

    if not public_key:
        raise MissingRequiredField("PublicKey", "template missing [Peer] PublicKey (server public key)")
    return TemplateDefaults(
        server_public_key=public_key,
        listen_port=listen_port,
        fallback_dns=dns,
        allowed_ips_template=allowed_ips,
    )


def parse_template(text: str) -> TemplateDefaults:
    return parse_template_lines(split_lines(text))


def read_template(path: str) -> TemplateDefaults:
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    return parse_template(text)
