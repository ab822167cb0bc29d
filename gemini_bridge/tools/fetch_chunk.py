from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..changes.format import ChunkFormatter
from .ask_gemini import coerce_chunk_index


NAME = "fetch-chunk"
DESCRIPTION = "Retrieve the next page of a chunked change-mode answer"


class FetchChunkArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cache_key: str = Field(alias="cacheKey", min_length=1, description="The cache key from the first response")
    chunk_index: int = Field(alias="chunkIndex", description="Which chunk to retrieve (1-based)")

    @field_validator("chunk_index", mode="before")
    @classmethod
    def _normalize_chunk_index(cls, value):
        return coerce_chunk_index(value)


def make(formatter: ChunkFormatter):
    async def fetch_chunk(args, on_progress=None):
        if not isinstance(args, FetchChunkArgs):
            args = FetchChunkArgs.model_validate(args)
        return formatter.format("", args.chunk_index, args.cache_key)

    schema = FetchChunkArgs.model_json_schema(by_alias=True)
    return {NAME: schema}, {NAME: fetch_chunk}
