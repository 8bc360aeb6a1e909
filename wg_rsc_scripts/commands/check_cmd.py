import argparse
import sys
from typing import Any, Dict

from ..common import load_inputs, require_and_load_settings
from ..config import dump_yaml
from ..routeros import ExportParseResult
from ..template import TemplateDefaults


def add_check_cmd(subparsers: argparse._SubParsersAction) -> None:
    c = subparsers.add_parser(
        "check",
        help="Parse inputs and report peers without writing anything",
        description="Loads the template and export, then prints a YAML report of valid and rejected peers.",
    )
    c.add_argument("-s", "--settings", default=None, help="Path to settings file (env: WGRS_SETTINGS)")
    c.add_argument("-t", "--template", default=None, help="Template client config")
    c.add_argument("-e", "--export", default=None, help="RouterOS export file")
    c.add_argument("--section", default=None, help="Export section holding the peers")
    c.set_defaults(func=run_check_cmd)


def run_check_cmd(args: argparse.Namespace) -> int:
    settings, settings_path = require_and_load_settings(args)
    if settings is None:
        return 2
    defaults, parsed = load_inputs(settings, settings_path)
    if defaults is None or parsed is None:
        return 2

    print(dump_yaml(build_report(defaults, parsed)), end="")
    if not parsed.peers:
        print(f"No peers found in export ({settings.section})", file=sys.stderr)
        return 2
    return 0


def build_report(defaults: TemplateDefaults, parsed: ExportParseResult) -> Dict[str, Any]:
    # Private and preshared keys are never included
    peers = []
    for p in parsed.peers:
        item: Dict[str, Any] = {"address": p.client_address, "endpoint": f"{p.endpoint_address}:{p.endpoint_port}"}
        if p.name:
            item["name"] = p.name
        item["has-dns"] = bool(p.client_dns)
        item["has-allowed-address"] = bool(p.allowed_address)
        peers.append(item)
    rejected = [
        {"line": r.line_number, "reasons": [reason.value for reason in r.reasons], "keys": list(r.keys)}
        for r in parsed.rejected
    ]
    return {
        "template": {
            "server-public-key": defaults.server_public_key,
            "listen-port": defaults.listen_port,
            "dns": defaults.fallback_dns,
            "allowed-ips": defaults.allowed_ips_template,
        },
        "peers": peers,
        "rejected": rejected,
    }
