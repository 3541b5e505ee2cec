"""Chunk entity - represents a segment of an over-long document."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Chunk(BaseModel):
    """A bounded slice of a document's text produced at ingestion time.

    ``start_char``/``end_char`` are the offsets of the untrimmed slice, so
    consecutive chunks tile the source text exactly.
    """

    index: int = Field(..., ge=0, description="Position in the document")
    title: str = Field(..., description="Sequential title, e.g. 'Report - Part 2'")
    content: str = Field(..., description="Trimmed text content of this chunk")
    start_char: int = Field(..., ge=0, description="Start character offset in document")
    end_char: int = Field(..., gt=0, description="End character offset in document")

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Chunk content cannot be empty")
        return v

    @field_validator("end_char")
    @classmethod
    def end_after_start(cls, v: int, info: Any) -> int:
        if "start_char" in info.data and v <= info.data["start_char"]:
            raise ValueError("end_char must be greater than start_char")
        return v
