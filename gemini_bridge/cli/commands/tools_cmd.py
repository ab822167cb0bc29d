from __future__ import annotations

import json

from ...tools.registry import build_registry


def add_tools(subparsers):
    parser = subparsers.add_parser("tools", help="List registered tools and their parameter schemas")
    parser.set_defaults(func=run_tools)


def run_tools(args, settings):
    registry = build_registry(settings)
    print(json.dumps(registry.describe(), indent=2))
