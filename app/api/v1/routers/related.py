# app/api/v1/routers/related.py
from fastapi import APIRouter, Depends, Query
import time
import logging

from app.api.deps import reco_context
from app.api.v1.schemas.reco import ProductListOut, product_list
from app.domain.services.recommendation_svc import RecoContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["related"])

@router.get("/products/{product_id}/related", response_model=ProductListOut)
async def related_products(
    product_id: str,
    limit: int = Query(5, ge=1, le=50),
    reco: RecoContext = Depends(reco_context),
):
    """
    Products sharing category/tags with `product_id` (the product itself is never returned).
    """
    logger.info("Request: related_products product_id=%s, limit=%s", product_id, limit)
    start_time = time.perf_counter()

    items = await reco.related(product_id, limit)

    logger.info(
        "Response: related_products product_id=%s, count=%s, elapsed_time=%.4fs",
        product_id, len(items), time.perf_counter() - start_time,
    )
    return product_list(items)
