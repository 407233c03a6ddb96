from typing import Optional

from pydantic import BaseModel, Field


class EncodeRequest(BaseModel):
    """Text to encode. null is accepted and returned as null."""
    text: Optional[str] = Field(..., examples=["Δ costs 5¢ <b>now</b>"])


class BatchEncodeRequest(BaseModel):
    """Several texts encoded in one call. Output order matches input order."""
    texts: list[Optional[str]] = Field(
        ..., min_length=1, max_length=100,
        examples=[["café", "&#162;", None]],
    )
