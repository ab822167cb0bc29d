from __future__ import annotations

from ...core.constants import DEFAULT_MODEL, GeminiModel


def add_ask(subparsers):
    parser = subparsers.add_parser("ask", help="Ask Gemini a one-shot question")
    parser.add_argument("prompt", help="Prompt text; use @path to include files")
    parser.add_argument(
        "-m",
        "--model",
        choices=[m.value for m in GeminiModel],
        default=DEFAULT_MODEL.value,
        help=f"Model to use (default {DEFAULT_MODEL.value})",
    )
    parser.add_argument("-s", "--sandbox", action="store_true", help="Run gemini in sandbox mode")
    parser.add_argument("--change-mode", action="store_true", help="Return structured edit suggestions")
    parser.add_argument("--chunk-index", help="Page of a chunked change-mode answer (1-based)")
    parser.add_argument("--chunk-cache-key", help="Cache key returned by an earlier change-mode answer")
    parser.set_defaults(func=run_ask)


def run_ask(args, settings):
    from . import run_tool

    arguments = {
        "prompt": args.prompt,
        "model": args.model,
        "sandbox": args.sandbox,
        "changeMode": args.change_mode,
    }
    if args.chunk_index is not None:
        arguments["chunkIndex"] = args.chunk_index
    if args.chunk_cache_key:
        arguments["chunkCacheKey"] = args.chunk_cache_key
    print(run_tool(settings, "ask-gemini", arguments))
