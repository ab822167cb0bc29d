from __future__ import annotations

import asyncio
import sys

from pydantic import ValidationError

from ...tools.gemini_executor import GeminiCLIError
from ...tools.registry import build_registry
from .ask import add_ask
from .fetch_chunk_cmd import add_fetch_chunk
from .tools_cmd import add_tools


def register(subparsers):
    add_ask(subparsers)
    add_fetch_chunk(subparsers)
    add_tools(subparsers)


def dispatch(args, settings):
    if not hasattr(args, "func"):
        raise SystemExit("No command provided")
    args.func(args, settings)


def run_tool(settings, name: str, arguments: dict, registry=None) -> str:
    """Dispatch one tool call, turning user and CLI failures into exit status 1."""
    registry = registry or build_registry(settings)
    try:
        return asyncio.run(registry.dispatch(name, arguments))
    except ValidationError as exc:
        print(f"{name} failed: invalid arguments\n{exc}", file=sys.stderr)
    except (ValueError, GeminiCLIError) as exc:
        print(f"{name} failed: {exc}", file=sys.stderr)
    raise SystemExit(1)
