import asyncio
import json

import pytest
from pydantic import ValidationError

from gemini_bridge.tools.registry import ToolRegistry, build_registry


class FakeExecutor:
    def __init__(self, output):
        self.output = output
        self.calls = 0

    async def run(self, prompt, model, sandbox=False, change_mode=False, on_progress=None):
        self.calls += 1
        return self.output


def test_build_registry_registers_all_tools(settings):
    registry = build_registry(settings, executor=FakeExecutor("x"))

    assert set(registry.schemas()) == {"ask-gemini", "fetch-chunk", "ping"}
    described = registry.describe()
    assert described["ask-gemini"]["category"] == "gemini"
    assert "changeMode" in described["ask-gemini"]["parameters"]["properties"]


def test_dispatch_accepts_json_string(settings):
    registry = build_registry(settings, executor=FakeExecutor("hello back"))

    result = asyncio.run(registry.dispatch("ask-gemini", json.dumps({"prompt": "hello"})))

    assert result == "Gemini response:\nhello back"


def test_dispatch_unknown_tool():
    with pytest.raises(ValueError, match="Unknown tool"):
        asyncio.run(ToolRegistry().dispatch("nope", {}))


def test_dispatch_validation_error_propagates(settings):
    registry = build_registry(settings, executor=FakeExecutor("x"))

    with pytest.raises(ValidationError):
        asyncio.run(registry.dispatch("ask-gemini", {"prompt": "x", "model": "unknown"}))


def test_ping(settings):
    registry = build_registry(settings, executor=FakeExecutor("x"))

    assert asyncio.run(registry.dispatch("ping", "")) == "Pong!"
    assert asyncio.run(registry.dispatch("ping", {"prompt": "echo"})) == "echo"


def test_change_mode_flow_through_fetch_chunk(settings):
    settings.chunk_max_chars = 900
    body = "v" * 300
    raw = "".join(
        f"**FILE: f{n}.py:1**\nOLD:\n{body}\nNEW:\n{body}\n**END**\n" for n in range(3)
    )
    executor = FakeExecutor(raw)
    registry = build_registry(settings, executor=executor)

    first = asyncio.run(registry.dispatch("ask-gemini", {"prompt": "big", "changeMode": True}))
    key = first.split('cacheKey="')[1].split('"')[0]
    second = asyncio.run(registry.dispatch("fetch-chunk", {"cacheKey": key, "chunkIndex": "2"}))
    third = asyncio.run(
        registry.dispatch("ask-gemini", {"prompt": "big", "changeMode": True, "chunkIndex": 3, "chunkCacheKey": key})
    )

    assert executor.calls == 1
    assert "Chunk 1 of 3" in first
    assert "Chunk 2 of 3" in second and "f1.py" in second
    assert "Chunk 3 of 3" in third and "This was the last chunk." in third


def test_fetch_chunk_requires_key(settings):
    registry = build_registry(settings, executor=FakeExecutor("x"))

    with pytest.raises(ValidationError):
        asyncio.run(registry.dispatch("fetch-chunk", {"chunkIndex": 1}))
