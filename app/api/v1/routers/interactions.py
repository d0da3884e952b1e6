# app/api/v1/routers/interactions.py
from fastapi import APIRouter, Depends, status
from app.api.deps import reco_context
from app.api.v1.schemas.reco import InteractionIn, InteractionOut
from app.domain.services.recommendation_svc import RecoContext

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["interactions"])

@router.post("/interactions", status_code=status.HTTP_202_ACCEPTED, response_model=InteractionOut)
async def record_interaction(
    body: InteractionIn,
    reco: RecoContext = Depends(reco_context),
):
    """
    Record a view/cart/purchase/search event. Always accepted; persistence
    failures are logged server-side only.
    """
    logger.info("Request: record_interaction user_id=%s product_id=%s action=%s",
                body.user_id, body.product_id, body.action.value)
    event = await reco.record(body.user_id, body.product_id, body.action)
    return InteractionOut(**event.model_dump())
