# api/v1/schemas/reco.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import List

from app.domain.models.product import Action


class InteractionIn(BaseModel):
    user_id: str
    product_id: str
    action: Action


class InteractionOut(BaseModel):
    user_id: str
    product_id: str
    action: Action
    timestamp: datetime


class ProductOut(BaseModel):
    id: str
    category: str | None = None
    tags: List[str] = []
    model_config = ConfigDict(extra="allow")


class ProductListOut(BaseModel):
    items: List[ProductOut]
    count: int


def product_list(products) -> ProductListOut:
    items = [ProductOut.model_validate(p.model_dump()) for p in products]
    return ProductListOut(items=items, count=len(items))
