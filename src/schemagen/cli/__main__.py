#!/usr/bin/env python3

import argparse
import sys

from schemagen.cli import config, generate
from schemagen.core.app_context import build_context


def main(argv=None):
    parser = argparse.ArgumentParser(prog="schemagen", description="Derive JSON Schema from Python types")
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands (they accept ctx)
    generate.register(subparsers)
    config.register(subparsers)

    args = parser.parse_args(argv)
    if hasattr(args, "func"):
        try:
            ctx = build_context()  # built once
        except ValueError as e:
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 1
        return args.func(args, ctx)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
