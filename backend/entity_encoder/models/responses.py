"""Response bodies of the encoder API.

Used as `response_model` so the OpenAPI schema lists every field and
responses are filtered to exactly these fields.
"""

from typing import Optional

from pydantic import BaseModel, Field


# --- Errors ---

class ErrorDetail(BaseModel):
    """Body of 404 and 413 responses."""
    detail: str


# --- Encoding ---

class EncodeOut(BaseModel):
    text: Optional[str] = None
    encoded: Optional[str] = None
    length_in: int = 0
    length_out: int = 0


class BatchEncodeOut(BaseModel):
    results: list[Optional[str]] = Field(default_factory=list)


# --- Entity table ---

class EntityOut(BaseModel):
    codepoint: int = Field(..., examples=[916])
    char: str = Field(..., examples=["Δ"])
    name: str = Field(..., examples=["Delta"])
    reference: str = Field(..., examples=["&Delta;"])


class EntityListOut(BaseModel):
    count: int
    entities: list[EntityOut]


# --- System ---

class HealthOut(BaseModel):
    status: str
    app: str
    version: str
    uptime_seconds: int
    entity_count: int
