from datetime import datetime, timezone
from enum import Enum
from typing import Any, FrozenSet, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Action(str, Enum):
    VIEW = "view"
    CART = "cart"
    PURCHASE = "purchase"
    SEARCH = "search"


class Product(BaseModel):
    """
    Catalog snapshot entry. Only id/category/tags drive the scoring; the rest
    of the catalog payload (name, prices, images...) is kept as extra fields.
    """
    id: str
    mongo_id: Optional[str] = Field(default=None, exclude=True)  # catalog `_id`
    category: Optional[str] = None
    tags: List[str] = []

    model_config = ConfigDict(frozen=True, extra="allow")  # immuable = safe

    @model_validator(mode="before")
    @classmethod
    def _collect_ids(cls, data: Any) -> Any:
        # records may carry `id`, `_id` or both; both must resolve to this product
        if isinstance(data, dict) and "_id" in data:
            data = dict(data)
            mongo_id = data.pop("_id")
            data["mongo_id"] = mongo_id
            if data.get("id") is None:
                data["id"] = mongo_id
        return data

    @field_validator("id", "mongo_id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_as_list(cls, v: Any) -> List[str]:
        if not isinstance(v, list):
            return []
        return [str(t) for t in v if t is not None]

    @property
    def keys(self) -> FrozenSet[str]:
        """Every id the catalog knows this product by."""
        return frozenset(k for k in (self.id, self.mongo_id) if k)


class InteractionEvent(BaseModel):
    user_id: str = Field(validation_alias=AliasChoices("user_id", "userId"))
    product_id: str = Field(validation_alias=AliasChoices("product_id", "productId"))
    action: Action
    timestamp: datetime

    model_config = ConfigDict(frozen=True, populate_by_name=True)  # immuable = safe

    @field_validator("timestamp")
    @classmethod
    def _aware_utc(cls, v: datetime) -> datetime:
        # logs written without an offset are treated as UTC
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


class ScoredProduct(BaseModel):
    product: Product
    score: float
    model_config = {"frozen": True}  # immuable = safe
