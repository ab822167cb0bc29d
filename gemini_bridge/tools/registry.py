"""
Tool registry with JSON-schema metadata and async dispatch.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional, Union
import json
import logging

from ..changes.cache import ChunkCache
from ..changes.format import ChunkFormatter
from ..core.config import Settings
from . import ask_gemini, fetch_chunk, ping
from .gemini_executor import GeminiExecutor, ProgressCallback


Handler = Callable[..., Awaitable[Any]]


class ToolRegistry:
    def __init__(self):
        self.tools: Dict[str, Dict[str, Any]] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, name: str, schema: Dict[str, Any], handler: Handler, description: str = "", category: str = ""):
        self.tools[name] = {
            "schema": schema,
            "handler": handler,
            "description": description,
            "category": category,
        }
        self.logger.debug("Registered tool %s", name)

    async def dispatch(
        self,
        name: str,
        arguments: Union[str, Dict[str, Any], None] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        if name not in self.tools:
            raise ValueError(f"Unknown tool {name}")
        if isinstance(arguments, str):
            arguments = json.loads(arguments) if arguments.strip() else {}
        handler = self.tools[name]["handler"]
        self.logger.info("Executing tool %s", name)
        result = await handler(arguments or {}, on_progress=on_progress)
        return str(result)

    def schemas(self) -> Dict[str, Any]:
        return {name: meta["schema"] for name, meta in self.tools.items()}

    def describe(self) -> Dict[str, Any]:
        return {
            name: {
                "description": meta["description"],
                "category": meta["category"],
                "parameters": meta["schema"],
            }
            for name, meta in self.tools.items()
        }


def build_registry(settings: Settings, executor: Optional[GeminiExecutor] = None) -> ToolRegistry:
    executor = executor or GeminiExecutor(settings)
    formatter = ChunkFormatter(ChunkCache(settings), max_chars=settings.chunk_max_chars)
    registry = ToolRegistry()

    entries = [
        (ask_gemini.make(executor, formatter), ask_gemini.DESCRIPTION, ask_gemini.CATEGORY),
        (fetch_chunk.make(formatter), fetch_chunk.DESCRIPTION, "gemini"),
        (ping.make(), ping.DESCRIPTION, "simple"),
    ]
    for (schemas, handlers), description, category in entries:
        for name, schema in schemas.items():
            registry.register(name, schema, handlers[name], description=description, category=category)
    return registry
