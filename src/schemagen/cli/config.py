# schemagen/cli/config.py
#!/usr/bin/env python3
import json
from pathlib import Path

from schemagen.core import config as config_module
from schemagen.core.app_context import AppContext


def register(subparsers):
    sp = subparsers.add_parser("config", help="Inspect the effective configuration")
    sps = sp.add_subparsers(dest="config_cmd")

    def config_default(args, ctx: AppContext) -> int:
        sp.print_help()
        return 1
    sp.set_defaults(func=config_default)

    showp = sps.add_parser("show", help="Print the merged configuration as JSON")
    showp.add_argument("--key", help="Dotted key to print instead of the whole config, e.g. 'logging.level'")
    showp.set_defaults(func=show_config)

    pathsp = sps.add_parser("paths", help="List the config files consulted, lowest precedence first")
    pathsp.set_defaults(func=show_paths)


def show_config(args, ctx: AppContext) -> int:
    value = ctx.config
    if args.key:
        for part in args.key.split("."):
            if not isinstance(value, dict) or part not in value:
                print(f"Unknown config key: {args.key}")
                return 1
            value = value[part]
    print(json.dumps(value, indent=2))
    return 0


def show_paths(args, ctx: AppContext) -> int:
    layers = [
        ("global", config_module.GLOBAL_CONFIG_PATH),
        ("project", Path.cwd() / config_module.PROJECT_CONFIG_NAME),
    ]
    for label, path in layers:
        status = "found" if path.exists() else "missing"
        print(f"{label:<8} {path} ({status})")
    return 0
