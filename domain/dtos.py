from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Lab:
    L: float
    a: float
    b: float


@dataclass(frozen=True)
class WeightedLab:
    L: float
    a: float
    b: float
    weight: float

    @property
    def lab(self) -> Lab:
        return Lab(self.L, self.a, self.b)

    @classmethod
    def from_lab(cls, lab: Lab, weight: float) -> "WeightedLab":
        return cls(L=lab.L, a=lab.a, b=lab.b, weight=weight)


@dataclass
class Palette:
    colors: List[WeightedLab] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.colors


@dataclass
class Product:
    id: str
    title: str
    image_url: str
    price_cents: int
    currency: str = "USD"
    brand: Optional[str] = None
    category: Optional[str] = None
    in_stock: bool = True
    palette: Palette = field(default_factory=Palette)


@dataclass
class SearchHit:
    product: Product
    score: float
