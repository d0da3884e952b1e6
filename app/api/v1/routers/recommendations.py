# app/api/v1/routers/recommendations.py
from fastapi import APIRouter, Depends, Query
import time
import logging

from app.api.deps import reco_context
from app.api.v1.schemas.reco import ProductListOut, product_list
from app.domain.services.recommendation_svc import RecoContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])

@router.get("/users/{user_id}/recommendations", response_model=ProductListOut)
async def user_recommendations(
    user_id: str,
    limit: int = Query(5, ge=1, le=50),
    reco: RecoContext = Depends(reco_context),
):
    """
    Personalized products ranked by category/tag affinity with the user's
    interactions. Users without history get a random discovery sample.
    """
    logger.info("Request: user_recommendations user_id=%s, limit=%s", user_id, limit)
    start_time = time.perf_counter()

    items = await reco.recommend(user_id, limit)

    logger.info(
        "Response: user_recommendations user_id=%s, count=%s, elapsed_time=%.4fs",
        user_id, len(items), time.perf_counter() - start_time,
    )
    return product_list(items)
