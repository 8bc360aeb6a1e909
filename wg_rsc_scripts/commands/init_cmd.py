import argparse
import os
import sys

from ..config import DEFAULT_SETTINGS_FILE, Settings


def add_init_cmd(subparsers: argparse._SubParsersAction) -> None:
    init = subparsers.add_parser(
        "init",
        help="Generate a settings YAML",
        description="Generate a settings YAML. Values can come from env (WGRS_*) and flags.",
    )
    init.add_argument(
        "-o",
        "--output",
        default=os.environ.get("WGRS_SETTINGS", DEFAULT_SETTINGS_FILE),
        help=f"Path to write the settings file (env: WGRS_SETTINGS). Default: {DEFAULT_SETTINGS_FILE}",
    )
    init.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output file if it exists",
    )

    init.add_argument("--template", default=None, help="Template client config (env: WGRS_TEMPLATE).")
    init.add_argument("--export", default=None, help="RouterOS export file (env: WGRS_EXPORT).")
    init.add_argument("--output-path", default=None, help="Directory for generated scripts (env: WGRS_OUTPUT_PATH).")
    init.add_argument("--extension", default=None, help="Script file extension (env: WGRS_EXTENSION).")
    init.add_argument("--wireguard-dir", default=None, help="WireGuard install directory (env: WGRS_WIREGUARD_DIR).")
    init.add_argument("--section", default=None, help="Export section holding the peers (env: WGRS_SECTION).")

    emit_qr_group = init.add_mutually_exclusive_group()
    emit_qr_group.add_argument("--emit-qr", dest="emit_qr", action="store_true", default=None, help="Emit QR codes")
    emit_qr_group.add_argument("--no-emit-qr", dest="emit_qr", action="store_false", help="Disable QR emission")
    init.set_defaults(emit_qr=None)

    init.set_defaults(func=run_init_cmd)


def run_init_cmd(args: argparse.Namespace) -> int:
    out_path = args.output
    if os.path.exists(out_path) and not args.overwrite:
        print(f"Refusing to overwrite existing file: {out_path}. Use --overwrite to replace.", file=sys.stderr)
        return 2

    settings = Settings.from_env(os.environ)
    settings.apply_args_overrides(args)

    errs = settings.validate()
    if errs:
        print("Settings validation failed:", file=sys.stderr)
        for e in errs:
            print(f"- {e}", file=sys.stderr)
        return 2

    settings.write_file(out_path, overwrite=args.overwrite)
    print(f"Settings written to {out_path}")
    return 0
