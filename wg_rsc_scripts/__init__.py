from .config import Settings
from .routeros import (
    ExportParseResult,
    PeerRecord,
    RejectReason,
    RejectedEntry,
    join_continuations,
    parse_peers,
)
from .template import MissingRequiredField, TemplateDefaults, parse_template
from .reconcile import ReconciledPeer, reconcile, reorder_allowed_ips

__all__ = [
    "Settings",
    "ExportParseResult",
    "PeerRecord",
    "RejectReason",
    "RejectedEntry",
    "join_continuations",
    "parse_peers",
    "MissingRequiredField",
    "TemplateDefaults",
    "parse_template",
    "ReconciledPeer",
    "reconcile",
    "reorder_allowed_ips",
]
