from __future__ import annotations
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

USAGE = (
    "/search <hex[:weight]> ... [tol=5..80] [cat=category]\n"
    "e.g. /search #7e9a6c:0.5 #e8dfc8:0.5 tol=20 cat=dress"
)


class SwatchIn(BaseModel):
    hex: str
    weight: float = Field(1.0, ge=0, le=1)


class SearchRequest(BaseModel):
    palette: List[SwatchIn] = Field(..., min_length=1)
    tolerance: float = Field(20.0, ge=5, le=80)
    category: Optional[str] = None


def parse_search_args(args: Iterable[str]) -> SearchRequest:
    """Build a ``SearchRequest`` from bot command tokens.

    Tokens are ``hex`` or ``hex:weight`` swatches plus optional ``tol=`` and
    ``cat=`` options. Hex strings are not checked here; malformed ones are
    skipped later when the query palette is built.
    """
    swatches = []
    options = {}
    for token in args:
        token = token.strip()
        if not token:
            continue
        key, sep, value = token.partition("=")
        if sep:
            key = key.lower()
            if key in ("tol", "tolerance"):
                options["tolerance"] = value
            elif key in ("cat", "category"):
                options["category"] = value or None
            else:
                raise ValueError(f"Unknown option: {key}")
            continue
        hex_part, sep, weight = token.partition(":")
        swatches.append({"hex": hex_part, "weight": weight} if sep else {"hex": hex_part})
    return SearchRequest.model_validate({"palette": swatches, **options})
