import argparse
from typing import Callable, Optional

from .commands.init_cmd import add_init_cmd
from .commands.check_cmd import add_check_cmd
from .commands.generate_cmd import add_generate_cmd

CommandHandler = Callable[[argparse.Namespace], int]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wg-rsc-scripts",
        description="Build WireGuard client installer scripts from a RouterOS peer export.",
    )
    # Subcommands define their own --settings and path options

    sub = p.add_subparsers(dest="command", required=True)
    add_init_cmd(sub)
    add_check_cmd(sub)
    add_generate_cmd(sub)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    handler: Optional[CommandHandler] = getattr(args, "func", None)
    if handler is None:
        parser.error("No subcommand handler attached")
    return handler(args)
