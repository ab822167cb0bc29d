from __future__ import annotations


def add_fetch_chunk(subparsers):
    parser = subparsers.add_parser("fetch-chunk", help="Fetch a page of a cached change-mode answer")
    parser.add_argument("cache_key", help="Cache key from the first page")
    parser.add_argument("chunk_index", help="Page number (1-based)")
    parser.set_defaults(func=run_fetch_chunk)


def run_fetch_chunk(args, settings):
    from . import run_tool

    print(run_tool(settings, "fetch-chunk", {"cacheKey": args.cache_key, "chunkIndex": args.chunk_index}))
