"""
Entry point for the gemini-bridge CLI.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Support running both as `python -m gemini_bridge.cli.main` and via direct path execution.
if __package__ is None or __package__ == "":
    project_root = Path(__file__).resolve().parents[2]
    sys.path.insert(0, str(project_root))
    from gemini_bridge.core.config import load_settings
    from gemini_bridge.core.logging_utils import setup_logging
    from gemini_bridge.cli import commands
else:
    from ..core.config import load_settings
    from ..core.logging_utils import setup_logging
    from ..cli import commands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gemini-bridge")
    parser.add_argument("--config", type=Path, help="Path to settings.toml (default config/settings.toml)")
    subparsers = parser.add_subparsers(dest="command")
    commands.register(subparsers)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args.config)
    setup_logging(settings)
    commands.dispatch(args, settings)


if __name__ == "__main__":
    main()
