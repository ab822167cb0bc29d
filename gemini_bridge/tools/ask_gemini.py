"""
ask-gemini tool: forward a prompt to the gemini CLI, optionally in sandbox or
change mode, and return plain text or a page of structured edit suggestions.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from ..changes.format import ChangeModeResult, ChunkFormatter
from ..core.constants import DEFAULT_MODEL, GEMINI_RESPONSE, NO_PROMPT_PROVIDED, GeminiModel
from .gemini_executor import GeminiExecutor, ProgressCallback


NAME = "ask-gemini"
DESCRIPTION = (
    "Execute 'gemini -p <prompt>' to get Gemini AI's response: model selection [-m], "
    "sandbox [-s], and changeMode:boolean for structured edit suggestions"
)
CATEGORY = "gemini"


def coerce_chunk_index(value: Any) -> Optional[int]:
    """Accept an int or numeric text and return a positive int."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("chunkIndex must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValueError(f"chunkIndex must be numeric, got {value!r}")
        value = int(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"chunkIndex must be a whole number, got {value}")
        value = int(value)
    if not isinstance(value, int):
        raise ValueError("chunkIndex must be a number")
    if value < 1:
        raise ValueError("chunkIndex is 1-based")
    return value


class AskGeminiArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(
        description=(
            "Analysis request. Use @ syntax to include files "
            "(e.g., '@largefile.js explain what this does') or ask general questions"
        ),
    )
    model: GeminiModel = Field(
        default=DEFAULT_MODEL,
        description=f"Optional model to use. If not specified, uses the default model ({DEFAULT_MODEL.value}).",
    )
    sandbox: StrictBool = Field(
        default=False,
        description=(
            "Use sandbox mode (-s flag) to safely test code changes, execute scripts, "
            "or run potentially risky operations in an isolated environment"
        ),
    )
    change_mode: StrictBool = Field(
        default=False,
        alias="changeMode",
        description=(
            "Enable structured change mode - formats prompts to prevent tool errors "
            "and returns structured edit suggestions that can be applied directly"
        ),
    )
    chunk_index: Optional[int] = Field(
        default=None,
        alias="chunkIndex",
        description="Which chunk to return (1-based); numeric text is accepted",
    )
    chunk_cache_key: Optional[str] = Field(
        default=None,
        alias="chunkCacheKey",
        description="Optional cache key for continuation",
    )

    @field_validator("chunk_index", mode="before")
    @classmethod
    def _normalize_chunk_index(cls, value):
        return coerce_chunk_index(value)


class AskGeminiTool:
    def __init__(self, executor: GeminiExecutor, formatter: ChunkFormatter):
        self.executor = executor
        self.formatter = formatter
        self.logger = logging.getLogger(__name__)

    async def execute(
        self,
        args: Union[AskGeminiArgs, Dict[str, Any]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Union[str, ChangeModeResult]:
        if not isinstance(args, AskGeminiArgs):
            args = AskGeminiArgs.model_validate(args)
        if not args.prompt.strip():
            raise ValueError(NO_PROMPT_PROVIDED)

        if args.change_mode and args.chunk_index and args.chunk_cache_key:
            self.logger.info("Serving chunk %d of cached answer %s", args.chunk_index, args.chunk_cache_key)
            return self.formatter.format("", args.chunk_index, args.chunk_cache_key, args.prompt)

        result = await self.executor.run(
            args.prompt,
            args.model.value,
            args.sandbox,
            args.change_mode,
            on_progress=on_progress,
        )

        if args.change_mode:
            return self.formatter.format(result, args.chunk_index, None, args.prompt)
        return f"{GEMINI_RESPONSE}\n{result}"


def make(executor: GeminiExecutor, formatter: ChunkFormatter):
    tool = AskGeminiTool(executor, formatter)
    schema = AskGeminiArgs.model_json_schema(by_alias=True)
    return {NAME: schema}, {NAME: tool.execute}
