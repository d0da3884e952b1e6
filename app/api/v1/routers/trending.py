from fastapi import APIRouter, Depends, Query
from app.api.deps import reco_context
from app.api.v1.schemas.reco import ProductListOut, product_list
from app.domain.services.recommendation_svc import RecoContext

import logging
import time
logger = logging.getLogger(__name__)

router = APIRouter(tags=["trending"])

@router.get("/trending", response_model=ProductListOut)
async def get_trending(
    limit: int = Query(5, ge=1, le=50),
    reco: RecoContext = Depends(reco_context),
):
    t0 = time.perf_counter()
    items = await reco.trending(limit)
    dt = time.perf_counter() - t0
    logger.info("Response: get_trending returned %s items in %.4fs", len(items), dt)
    return product_list(items)
