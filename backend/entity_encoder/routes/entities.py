"""Read-only access to the named entity table."""

import logging
import string
from typing import Optional

from fastapi import APIRouter, HTTPException

from ..entities import ENTITY_TABLE, EntityEntry, codepoint_for, iter_entities
from ..models.responses import EntityListOut, EntityOut, ErrorDetail

logger = logging.getLogger("entity_encoder.entities")

router = APIRouter(prefix="/api/entities", tags=["entities"])

# Longest significant digit runs that can still name a code point
_MAX_SIGNIFICANT_DIGITS = {10: 7, 16: 6}

_404 = {404: {"model": ErrorDetail, "description": "No named entity for this key"}}


def _entry_to_dict(entry: EntityEntry) -> dict:
    return {
        "codepoint": entry.codepoint,
        "char": entry.char,
        "name": entry.name,
        "reference": entry.reference,
    }


def _resolve_key(key: str) -> Optional[int]:
    """Map an entity name, a decimal code point or U+XXXX to a code point."""
    codepoint = codepoint_for(key)
    if codepoint is not None:
        return codepoint
    if key.isascii() and key.isdigit():
        digits, base = key, 10
    elif key[:2] in ("U+", "u+") and key[2:] and all(c in string.hexdigits for c in key[2:]):
        digits, base = key[2:], 16
    else:
        return None
    # int() refuses long decimal strings, so only significant digits reach it
    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_SIGNIFICANT_DIGITS[base]:
        return None
    return int(significant, base)


@router.get("", response_model=EntityListOut, summary="List entities")
async def list_entities():
    """Every entity in the table, in code point order."""
    entities = [_entry_to_dict(e) for e in iter_entities()]
    return {"count": len(entities), "entities": entities}


@router.get("/{key}", response_model=EntityOut, summary="Get entity", responses=_404)
async def get_entity(key: str):
    """Look up one entity by name (Delta), code point (916) or U+0394."""
    codepoint = _resolve_key(key)
    name = ENTITY_TABLE.get(codepoint) if codepoint is not None else None
    if name is None:
        logger.debug("No entity for key %r", key)
        raise HTTPException(status_code=404, detail="Entity not found")
    return _entry_to_dict(EntityEntry(codepoint, name))
