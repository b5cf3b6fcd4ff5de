"""Domain models for catalog items, orders and scored recommendations.

Catalog items mirror the documents held by the catalog store, so the stored
identity field is ``_id``. Anything leaving the recommender goes through
:func:`transform_item`, which exposes identity as ``id``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Scored text channels, in breakdown order
CHANNELS = ("name", "category", "description", "colors")


class CatalogItem(BaseModel):
    """A product document from the catalog store."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    name: str
    category: str
    description: str
    colors: List[str] = Field(default_factory=list)
    price: Optional[float] = None
    original_price: Optional[float] = Field(default=None, alias="originalPrice")
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    stock: int = 0
    in_stock: bool = Field(default=True, alias="inStock")
    featured: bool = False
    rating: float = 0.0
    reviews: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        # Document stores hand out ObjectIds and ints as well as strings
        return str(value)

    @field_validator("colors", "images", "sizes", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def channel_text(self, channel: str) -> str:
        """Get the text scored for a channel.

        Colors are joined with a single space into one blob.
        """
        if channel == "colors":
            return " ".join(self.colors)
        return getattr(self, channel)


def transform_item(item: CatalogItem) -> Dict[str, Any]:
    """Convert a stored catalog item to its public shape.

    The stored ``_id`` becomes ``id``; all other fields keep their stored
    names. Optional fields that are unset are left out.
    """
    data = item.model_dump(by_alias=True, exclude_none=True)
    data["id"] = data.pop("_id")
    return data


@dataclass
class OrderLine:
    """One line of an order, with its product reference resolved if possible."""

    product_id: str
    quantity: int = 1
    product: Optional[CatalogItem] = None


@dataclass
class Order:
    """A customer order as seen by the co-occurrence ranker."""

    order_id: str
    status: str
    created_at: datetime
    lines: List[OrderLine] = field(default_factory=list)

    def contains(self, product_id: str) -> bool:
        return any(line.product_id == product_id for line in self.lines)


@dataclass
class ScoreBreakdown:
    """Per-channel similarity scores for one compared item."""

    name: float = 0.0
    category: float = 0.0
    description: float = 0.0
    colors: float = 0.0

    @property
    def total(self) -> float:
        return self.name + self.category + self.description + self.colors

    def to_dict(self) -> Dict[str, float]:
        return {channel: getattr(self, channel) for channel in CHANNELS}


@dataclass
class Recommendation:
    """A catalog item ranked by similarity to a target item."""

    item: CatalogItem
    score: float
    breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        """Public item fields plus score and breakdown."""
        data = transform_item(self.item)
        data["score"] = self.score
        data["breakdown"] = self.breakdown.to_dict()
        return data
