"""RouterOS export (``.rsc``) reading: line continuations and WireGuard peer entries."""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

DEFAULT_SECTION = "/interface wireguard peers"
SECTION_DELIMITER = "/"
ENTRY_PREFIX = "add "
CONTINUATION_MARKER = "\\"
QUOTE = '"'

# Key aliases per field, in lookup priority order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name",),
    "client_address": ("client-address", "address", "clientaddress"),
    "client_dns": ("client-dns", "dns", "clientdns"),
    "endpoint_address": ("endpoint-address", "endpoint", "endpointaddress"),
    "endpoint_port": ("endpoint-port", "endpointport"),
    "private_key": ("private-key",),
    "public_key": ("public-key",),
    "preshared_key": ("preshared-key",),
    "allowed_address": ("allowed-address", "allowedaddress"),
}


class RejectReason(enum.Enum):
    MISSING_CLIENT_ADDRESS = "client-address missing"
    MISSING_PRIVATE_KEY = "private-key missing"
    MISSING_PRESHARED_KEY = "preshared-key missing"
    MISSING_ENDPOINT_ADDRESS = "endpoint-address missing"
    MISSING_ENDPOINT_PORT = "endpoint-port missing"


@dataclass(frozen=True)
class PeerRecord:
    name: str = ""
    client_address: str = ""
    client_dns: str = ""
    endpoint_address: str = ""
    endpoint_port: str = ""
    private_key: str = ""
    public_key: str = ""
    preshared_key: str = ""
    allowed_address: str = ""

    def reject_reasons(self) -> Tuple[RejectReason, ...]:
        reasons: List[RejectReason] = []
        for reason, value in (
            (RejectReason.MISSING_CLIENT_ADDRESS, self.client_address),
            (RejectReason.MISSING_PRIVATE_KEY, self.private_key),
            (RejectReason.MISSING_PRESHARED_KEY, self.preshared_key),
            (RejectReason.MISSING_ENDPOINT_ADDRESS, self.endpoint_address),
            (RejectReason.MISSING_ENDPOINT_PORT, self.endpoint_port),
        ):
            if not value:
                reasons.append(reason)
        return tuple(reasons)


@dataclass(frozen=True)
class RejectedEntry:
    line_number: int
    reasons: Tuple[RejectReason, ...]
    keys: Tuple[str, ...]


@dataclass()
class ExportParseResult:
    peers: List[PeerRecord] = field(default_factory=list)
    rejected: List[RejectedEntry] = field(default_factory=list)


def split_lines(text: str) -> List[str]:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.split("\n")


def join_continuations(lines: List[str]) -> List[str]:
    """Merge backslash-continued physical lines into logical lines.

    A continued line loses its marker and is right-trimmed; the line that ends
    the run is left-trimmed. Parts are joined with a single space.
    """
    out: List[str] = []
    buf = ""
    for raw in lines:
        line = raw.rstrip(" \t")
        if line.endswith(CONTINUATION_MARKER):
            buf += line[: -len(CONTINUATION_MARKER)].rstrip(" ") + " "
            continue
        if buf:
            out.append(buf + line.strip())
            buf = ""
        else:
            out.append(raw)
    # export ended mid-continuation
    if buf:
        out.append(buf)
    return out


def logical_lines(text: str) -> List[str]:
    return join_continuations(split_lines(text))


def split_fields_preserve_quotes(s: str) -> List[str]:
    """Split on whitespace, except inside double-quoted spans. Quotes are kept."""
    out: List[str] = []
    cur: List[str] = []
    in_quote = False
    for ch in s:
        if ch == QUOTE:
            in_quote = not in_quote
            cur.append(ch)
        elif ch.isspace() and not in_quote:
            if cur:
                out.append("".join(cur))
                cur = []
        else:
            cur.append(ch)
    if cur:
        out.append("".join(cur))
    return out


def is_key_token(token: str) -> bool:
    if token.startswith(QUOTE):
        return False
    eq = token.find("=")
    if eq <= 0:
        return False
    return all((ch.isascii() and ch.isalnum()) or ch == "-" for ch in token[:eq])


class _TokenState(enum.Enum):
    SEEKING_KEY = "seeking-key"
    ABSORBING_VALUE = "absorbing-value"


def combine_tokens(tokens: List[str]) -> List[Tuple[str, str]]:
    """Group tokens into raw ``(key, value)`` pairs.

    A key token with an empty value absorbs the bare tokens that follow it, up
    to the next key token. Bare tokens anywhere else are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    state = _TokenState.SEEKING_KEY
    key: Optional[str] = None
    parts: List[str] = []

    for token in tokens:
        if is_key_token(token):
            if key is not None:
                pairs.append((key, " ".join(parts)))
            k, _, v = token.partition("=")
            key, parts = k, [v] if v else []
            state = _TokenState.SEEKING_KEY if v else _TokenState.ABSORBING_VALUE
        elif state is _TokenState.ABSORBING_VALUE:
            parts.append(token.strip())
    if key is not None:
        pairs.append((key, " ".join(parts)))
    return pairs


def trim_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == QUOTE and value[-1] == QUOTE:
        return value[1:-1]
    return value


def tokenize_entry(rest: str) -> Dict[str, str]:
    """Parse the ``key=value`` part of an ``add`` line into a lower-cased key map."""
    kv: Dict[str, str] = {}
    for key, value in combine_tokens(split_fields_preserve_quotes(rest)):
        kv[key.strip().lower()] = trim_quotes(value).strip()
    return kv


def _first_non_empty(kv: Dict[str, str], aliases: Tuple[str, ...]) -> str:
    for alias in aliases:
        val = kv.get(alias, "")
        if val.strip():
            return val
    return ""


def build_peer_record(kv: Dict[str, str]) -> PeerRecord:
    return PeerRecord(**{name: _first_non_empty(kv, aliases) for name, aliases in FIELD_ALIASES.items()})


def parse_peer_line(line: str) -> Tuple[Optional[PeerRecord], Dict[str, str]]:
    """Parse one ``add ...`` logical line.

    Returns the record (``None`` when the line carries no tokens at all) and
    the key map it was built from.
    """
    rest = line.lstrip()
    if rest.startswith(ENTRY_PREFIX):
        rest = rest[len(ENTRY_PREFIX):]
    rest = rest.strip()
    if not rest:
        return None, {}
    kv = tokenize_entry(rest)
    if not kv:
        return None, kv
    return build_peer_record(kv), kv


def parse_peers(text: str, section: str = DEFAULT_SECTION) -> ExportParseResult:
    """Collect peer records from the given export section.

    Invalid entries end up in ``rejected``; nothing here raises on bad input.
    """
    result = ExportParseResult()
    active = False
    for idx, raw in enumerate(logical_lines(text), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(section):
            active = True
            continue
        if line.startswith(SECTION_DELIMITER):
            active = False
        if not active or not line.startswith(ENTRY_PREFIX):
            continue
        record, kv = parse_peer_line(line)
        if record is None:
            continue
        reasons = record.reject_reasons()
        if reasons:
            result.rejected.append(RejectedEntry(line_number=idx, reasons=reasons, keys=tuple(sorted(kv))))
            continue
        result.peers.append(record)
    return result


def read_export(path: str, section: str = DEFAULT_SECTION) -> ExportParseResult:
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    return parse_peers(text, section=section)
