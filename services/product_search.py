from __future__ import annotations
import logging
from concurrent.futures import Executor
from typing import Iterable, List, Optional, Tuple

from config import Settings
from domain.dtos import Palette, SearchHit, WeightedLab
from domain.errors import InvalidColorFormat
from services.color_space import hex_to_lab
from services.palette_matcher import palette_score
from services.product_repository import ProductRepository

log = logging.getLogger(__name__)

class ProductSearch:
    """Candidate pre-filtering, scoring and ranking around ``palette_score``."""

    def __init__(self, repo: ProductRepository, settings: Settings, executor: Optional[Executor] = None) -> None:
        self.repo = repo
        self.settings = settings
        self.executor = executor

    @staticmethod
    def build_query_palette(swatches: Iterable[Tuple[str, float]]) -> Palette:
        """Convert (hex, weight) pairs; malformed swatches are skipped.

        Raises ``InvalidColorFormat`` only when no swatch could be converted.
        """
        colors = []
        rejected = []
        for hex_color, weight in swatches:
            try:
                lab = hex_to_lab(hex_color)
            except InvalidColorFormat as e:
                log.warning("Skipping swatch: %s", e)
                rejected.append(hex_color)
                continue
            colors.append(WeightedLab.from_lab(lab, float(weight)))
        if not colors and rejected:
            raise InvalidColorFormat(f"No valid colors in query: {', '.join(map(repr, rejected))}")
        return Palette(colors=colors)

    def search(self, swatches: Iterable[Tuple[str, float]], tolerance: Optional[float] = None,
               category: Optional[str] = None) -> List[SearchHit]:
        return self.search_palette(self.build_query_palette(swatches), tolerance, category)

    def search_palette(self, query: Palette, tolerance: Optional[float] = None,
                       category: Optional[str] = None) -> List[SearchHit]:
        if tolerance is None:
            tolerance = self.settings.default_tolerance
        candidates = self.repo.find_candidates(category=category, limit=self.settings.candidate_limit)

        def score(product):
            return palette_score(product.palette, query, tolerance)

        if self.executor is not None:
            scores = list(self.executor.map(score, candidates))
        else:
            scores = [score(p) for p in candidates]

        hits = [SearchHit(product=p, score=s) for p, s in zip(candidates, scores) if s > self.settings.min_score]
        hits.sort(key=lambda h: h.score, reverse=True)
        hits = hits[:self.settings.max_results]
        log.info("Scored %d candidates (category=%s, tolerance=%s), %d hits",
                 len(candidates), category, tolerance, len(hits))
        return hits
