from __future__ import annotations
import json
import math
from typing import Dict, List, Optional

from sqlalchemy import Boolean, Column, Integer, String, Text, func, select, create_engine
from sqlalchemy.orm import declarative_base, Session

from domain.dtos import Palette, Product, WeightedLab
from domain.errors import InvalidPaletteData

Base = declarative_base()

class ProductRow(Base):
    __tablename__ = 'products'
    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    category = Column(String, index=True, nullable=True)
    price_cents = Column(Integer, nullable=False)
    currency = Column(String, nullable=False, default="USD")
    image_url = Column(String, nullable=False)
    in_stock = Column(Boolean, index=True, nullable=False, default=True)
    palette_json = Column(Text, nullable=True)

class ProductRepository:
    def __init__(self, db_url: str) -> None:
        self.engine = create_engine(db_url, future=True)
        Base.metadata.create_all(self.engine)

    def upsert(self, product: Product) -> None:
        """Insert or replace a product. A prior palette is overwritten, never merged."""
        with Session(self.engine) as s:
            s.merge(ProductRow(
                id=product.id,
                title=product.title,
                brand=product.brand,
                category=product.category,
                price_cents=product.price_cents,
                currency=product.currency,
                image_url=product.image_url,
                in_stock=product.in_stock,
                palette_json=self.palette_to_json(product.palette),
            ))
            s.commit()

    def get(self, product_id: str) -> Optional[Product]:
        with Session(self.engine) as s:
            row = s.get(ProductRow, product_id)
            return self._to_product(row) if row is not None else None

    def find_candidates(self, category: Optional[str] = None, limit: int = 400) -> List[Product]:
        stmt = select(ProductRow).where(ProductRow.in_stock.is_(True))
        if category:
            stmt = stmt.where(ProductRow.category == category)
        stmt = stmt.order_by(ProductRow.id).limit(limit)
        with Session(self.engine) as s:
            return [self._to_product(r) for r in s.scalars(stmt).all()]

    def count_by_category(self) -> Dict[str, int]:
        with Session(self.engine) as s:
            rows = s.execute(select(ProductRow.category, func.count()).group_by(ProductRow.category)).all()
            return {(cat or "uncategorized"): n for cat, n in rows}

    @classmethod
    def _to_product(cls, r: ProductRow) -> Product:
        return Product(
            id=r.id,
            title=r.title,
            brand=r.brand,
            category=r.category,
            price_cents=r.price_cents,
            currency=r.currency,
            image_url=r.image_url,
            in_stock=bool(r.in_stock),
            palette=cls.palette_from_json(r.palette_json),
        )

    @staticmethod
    def palette_to_json(palette: Palette) -> str:
        return json.dumps([{
            'L': c.L, 'a': c.a, 'b': c.b, 'weight': c.weight
        } for c in palette.colors])

    @staticmethod
    def palette_from_json(js: Optional[str]) -> Palette:
        if not js:
            return Palette()
        try:
            data = json.loads(js)
        except json.JSONDecodeError as e:
            raise InvalidPaletteData(f"Palette is not valid JSON: {e}") from e
        # anything other than a list carries no color information
        if not isinstance(data, list):
            return Palette()
        colors = []
        for i, e in enumerate(data):
            try:
                values = [float(e[key]) for key in ('L', 'a', 'b', 'weight')]
            except (KeyError, TypeError, ValueError) as exc:
                raise InvalidPaletteData(f"Palette entry {i} is malformed: {e!r}") from exc
            if not all(math.isfinite(v) for v in values):
                raise InvalidPaletteData(f"Palette entry {i} has non-finite values: {e!r}")
            if values[3] < 0:
                raise InvalidPaletteData(f"Palette entry {i} has a negative weight")
            colors.append(WeightedLab(*values))
        return Palette(colors=colors)
