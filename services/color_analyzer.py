from __future__ import annotations
import logging
from typing import Optional

import numpy as np

from domain.dtos import Palette, WeightedLab
from services.color_space import rgb_array_to_lab
from services.image_utils import opaque_rgb_pixels

log = logging.getLogger(__name__)


class ColorAnalyzer:
    """K-means palette extraction in Lab space.

    Randomness (subsampling and centroid seeding) comes only from the
    ``rng`` passed to each call, so a seeded ``np.random.Generator`` makes
    extraction reproducible.
    """

    def __init__(self, k: int = 6, max_samples: int = 8000, max_iterations: int = 12,
                 min_weight: float = 0.02, max_width: int = 200) -> None:
        if max_samples <= 0:
            raise ValueError(f"max_samples must be positive, got {max_samples}")
        self.k = k
        self.max_samples = max_samples
        self.max_iterations = max_iterations
        self.min_weight = min_weight
        self.max_width = max_width

    def extract_from_image(self, image: np.ndarray, rng: Optional[np.random.Generator] = None) -> Palette:
        pixels = opaque_rgb_pixels(image, max_width=self.max_width)
        return self.extract_palette(pixels, rng=rng)

    def extract_palette(self, pixels, rng: Optional[np.random.Generator] = None) -> Palette:
        rng = rng if rng is not None else np.random.default_rng()
        rgb = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)

        # Bound the clustering cost regardless of image size
        if len(rgb) > self.max_samples:
            rgb = rgb[rng.choice(len(rgb), size=self.max_samples, replace=False)]

        labs = rgb_array_to_lab(rgb)
        n = len(labs)
        n_clusters = min(self.k, n)
        if n == 0 or n_clusters <= 0:
            return Palette()

        centroids = labs[rng.choice(n, size=n_clusters, replace=False)].copy()
        assignments = np.zeros(n, dtype=np.intp)

        for it in range(self.max_iterations):
            d2 = ((labs[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
            nearest = d2.argmin(axis=1)
            moved = int((nearest != assignments).sum())
            assignments = nearest

            counts = np.bincount(assignments, minlength=n_clusters)
            sums = np.zeros_like(centroids)
            np.add.at(sums, assignments, labs)
            filled = counts > 0
            # empty clusters keep their previous centroid
            centroids[filled] = sums[filled] / counts[filled, None]

            if moved == 0:
                log.debug("k-means converged after %d iterations", it + 1)
                break

        counts = np.bincount(assignments, minlength=n_clusters)
        weights = counts / float(n)
        colors = [
            WeightedLab(L=float(c[0]), a=float(c[1]), b=float(c[2]), weight=float(w))
            for c, w in zip(centroids, weights)
            if w > self.min_weight
        ]
        # Sort by weight desc
        colors.sort(key=lambda c: c.weight, reverse=True)
        total = sum(c.weight for c in colors)
        if total <= 0:
            return Palette()
        colors = [WeightedLab(L=c.L, a=c.a, b=c.b, weight=c.weight / total) for c in colors]
        log.debug("Extracted %d colors from %d samples", len(colors), n)
        return Palette(colors=colors)
