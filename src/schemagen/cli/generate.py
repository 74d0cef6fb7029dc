#!/usr/bin/env python3
"""
`schemagen generate MODULE:ATTR` - derive and print (or write) a schema document.
"""

from pathlib import Path

from schemagen.core.app_context import AppContext
from schemagen.core.constants import SUPPORTED_OUTPUT_FORMATS
from schemagen.core.document import Document
from schemagen.core.errors import SchemaGenError
from schemagen.core.utils import import_object, write_text_file


def register(subparsers):
    gp = subparsers.add_parser("generate", help="Generate a JSON Schema from a Python type")
    gp.add_argument("target", help="Importable type or value, e.g. 'myapp.models:Order'")
    gp.add_argument("-o", "--output", type=Path, help="Write to this file instead of stdout")
    gp.add_argument("--indent", type=int, help="JSON indentation (default from config)")
    gp.add_argument("--format", choices=sorted(SUPPORTED_OUTPUT_FORMATS), help="Output format (default from config)")
    gp.set_defaults(func=generate)


def generate(args, ctx: AppContext) -> int:
    try:
        obj = import_object(args.target)
    except (ValueError, ImportError, AttributeError) as e:
        print(f"Cannot load '{args.target}': {e}")
        return 1

    try:
        document = Document().read(obj)
    except SchemaGenError as e:
        print(f"Cannot derive schema for '{args.target}': {e}")
        return 1
    ctx.logger.debug("Derived schema for %s", args.target)

    fmt = args.format or ctx.output_format
    indent = ctx.indent if args.indent is None else args.indent
    text = document.render_yaml().rstrip("\n") if fmt == "yaml" else document.render(indent=indent)

    if args.output is None:
        print(text)
        return 0

    try:
        write_text_file(args.output, text)
    except OSError as e:
        print(f"Cannot write to {args.output}: {e}")
        return 2
    print(f"Schema written to {args.output}")
    return 0
