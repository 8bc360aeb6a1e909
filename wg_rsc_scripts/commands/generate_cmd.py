import argparse
import os
import sys

import qrcode
from qrcode.image.styledpil import StyledPilImage
from qrcode.image.styles.moduledrawers import RoundedModuleDrawer
from qrcode.image.styles.colormasks import HorizontalGradiantColorMask

from ..common import load_inputs, require_and_load_settings
from ..reconcile import ReconciledPeer, reconcile
from ..render import render_client_conf, render_install_script


def add_generate_cmd(subparsers: argparse._SubParsersAction) -> None:
    g = subparsers.add_parser(
        "generate",
        help="Generate one installer script per peer",
        description="Read the template config and RouterOS export, then write one WireGuard installer script per valid peer.",
    )
    g.add_argument("-s", "--settings", default=None, help="Path to settings file (env: WGRS_SETTINGS)")
    g.add_argument("-t", "--template", default=None, help="Template client config (default: wg.conf)")
    g.add_argument("-e", "--export", default=None, help="RouterOS export file (default: wg.rsc)")
    g.add_argument("-o", "--output-path", default=None, help="Directory for generated scripts")
    g.add_argument("--extension", default=None, help="Script file extension (default: .cmd)")
    g.add_argument("--wireguard-dir", default=None, help="WireGuard install directory on the client")
    g.add_argument("--section", default=None, help="Export section holding the peers")
    qr = g.add_mutually_exclusive_group()
    qr.add_argument("--emit-qr", dest="emit_qr", action="store_true", default=None, help="Also write a QR code per peer")
    qr.add_argument("--no-emit-qr", dest="emit_qr", action="store_false", help="Do not write QR codes")
    g.set_defaults(func=run_generate_cmd)


def run_generate_cmd(args: argparse.Namespace) -> int:
    settings, settings_path = require_and_load_settings(args)
    if settings is None:
        return 2

    defaults, parsed = load_inputs(settings, settings_path)
    if defaults is None or parsed is None:
        return 2
    if not parsed.peers:
        print(f"No peers found in export ({settings.section})", file=sys.stderr)
        return 2

    out_dir = settings.resolve_output_dir(settings_path)
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as e:
        print(f"Cannot create output directory {out_dir}: {e}", file=sys.stderr)
        return 2

    rc = 0
    written: set[str] = set()
    for record in parsed.peers:
        peer = reconcile(record, defaults)
        stem = peer.host
        if not is_safe_stem(stem):
            print(f"Skipping {stem!r}: address is not usable as a file name", file=sys.stderr)
            rc |= 1
            continue
        if stem in written:
            print(f"Skipping {record.client_address}: {stem} already written by another peer", file=sys.stderr)
            rc |= 1
            continue
        out_path = os.path.join(out_dir, stem + settings.extension)
        try:
            _write_script(out_path, render_install_script(peer, settings.wireguard_dir))
        except (OSError, ValueError) as e:
            print(f"Skipping {stem}: {e}", file=sys.stderr)
            rc |= 1
            continue
        written.add(stem)
        print(f"Wrote {out_path}")
        if settings.emit_qr:
            qr_path = os.path.join(out_dir, f"{stem}.png")
            try:
                _write_qr(qr_path, peer)
            except (OSError, ValueError) as e:
                print(f"QR code for {stem} not written: {e}", file=sys.stderr)
                rc |= 1
    return rc


def is_safe_stem(stem: str) -> bool:
    """True when ``stem`` names a plain file directly inside the output directory."""
    if not stem or stem in (".", ".."):
        return False
    if os.path.isabs(stem) or os.path.dirname(stem):
        return False
    # the script also runs on Windows, where a backslash separates directories
    return "\\" not in stem


def _write_script(path: str, text: str) -> None:
    # CRLF is already in the text; keep it as-is
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


def _write_qr(path: str, peer: ReconciledPeer) -> None:
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_Q)
    qr.add_data(render_client_conf(peer))
    qr.make(fit=True)
    color_mask = HorizontalGradiantColorMask(
        back_color=(255, 255, 255),
        left_color=(128, 0, 255),
        right_color=(0, 123, 255),
    )
    img = qr.make_image(
        image_factory=StyledPilImage,
        module_drawer=RoundedModuleDrawer(),
        color_mask=color_mask,
    )
    img.save(path)
