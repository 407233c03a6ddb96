"""Encoding endpoints - turn text into HTML-safe text with named entities."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from .. import config
from ..encoder import encode
from ..metrics import metrics
from ..models.encoding import BatchEncodeRequest, EncodeRequest
from ..models.responses import BatchEncodeOut, EncodeOut, ErrorDetail

logger = logging.getLogger("entity_encoder.encode")

router = APIRouter(prefix="/api/encode", tags=["encode"])

_413 = {413: {"model": ErrorDetail, "description": "Text exceeds the configured maximum length"}}


def _check_length(total: int):
    limit = config.MAX_TEXT_LENGTH
    if limit > 0 and total > limit:
        logger.warning("Rejected encode request: %d characters (max %d)", total, limit)
        raise HTTPException(
            status_code=413,
            detail=f"Text too long: {total} characters (max {limit})",
        )


def _encode_counted(text: Optional[str]) -> Optional[str]:
    encoded = encode(text)
    if text is not None:
        metrics.record_encode(len(text), len(encoded))
    return encoded


@router.post("", response_model=EncodeOut, summary="Encode text", responses=_413)
async def encode_text(body: EncodeRequest):
    """Encode a single text. Characters with a named entity use it (&Delta;, &cent;)."""
    _check_length(len(body.text or ""))
    encoded = _encode_counted(body.text)
    return {
        "text": body.text,
        "encoded": encoded,
        "length_in": len(body.text or ""),
        "length_out": len(encoded or ""),
    }


@router.post("/batch", response_model=BatchEncodeOut, summary="Encode several texts",
             responses=_413)
async def encode_batch(body: BatchEncodeRequest):
    """Encode a list of texts; null entries stay null."""
    _check_length(sum(len(t) for t in body.texts if t))
    results = [_encode_counted(t) for t in body.texts]
    logger.debug("Encoded batch of %d text(s)", len(results))
    return {"results": results}
