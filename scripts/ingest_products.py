# scripts/ingest_products.py

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Optional

# --- Add the project root to sys.path when the script is run directly ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# -------------------------------------------------------------------------

from config import Settings
from domain.dtos import Product
from services.color_analyzer import ColorAnalyzer
from services.product_repository import ProductRepository
from services.image_utils import bytes_to_cv2

SUPPORTED_EXTS = (".jpg", ".jpeg", ".png")

log = logging.getLogger("ingest")


def product_title(file: Path) -> str:
    return file.stem.replace("_", " ").replace("-", " ")


def ingest_folder(settings: Optional[Settings] = None, analyzer: Optional[ColorAnalyzer] = None) -> int:
    settings = settings or Settings()
    repo = ProductRepository(settings.db_url)
    colors = analyzer or ColorAnalyzer(k=settings.palette_k, max_samples=settings.max_samples,
                                       max_width=settings.max_width)

    base = Path(settings.samples_dir)
    base.mkdir(parents=True, exist_ok=True)
    files = sorted(f for f in base.iterdir() if f.is_file() and f.suffix.lower() in SUPPORTED_EXTS)
    if not files:
        log.info("No images found in %s. Add a few JPG/PNG files and rerun.", base)
        return 0

    count = 0
    for i, file in enumerate(files):
        try:
            img = bytes_to_cv2(file.read_bytes())
        except ValueError:
            log.warning("Skipping unreadable image %s", file)
            continue
        palette = colors.extract_from_image(img)
        # sample_{i} ids make re-runs replace the previous palette
        repo.upsert(Product(
            id=f"sample_{i}",
            title=product_title(file),
            brand="Sample",
            category="dress" if i % 2 else "top",
            price_cents=5999 + i * 100,
            currency="USD",
            image_url=f"/samples/{file.name}",
            in_stock=True,
            palette=palette,
        ))
        log.debug("%s -> %d colors", file.name, len(palette.colors))
        count += 1

    return count


if __name__ == "__main__":
    _settings = Settings()
    logging.basicConfig(level=_settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    n = ingest_folder(_settings)
    log.info("Seeded %d products.", n)
