# app/api/v1/routers/catalog.py
from fastapi import APIRouter, Depends
from app.api.deps import reco_context
from app.api.v1.schemas.reco import ProductListOut, product_list
from app.domain.services.recommendation_svc import RecoContext

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])

@router.get("/categories/{category}/products", response_model=ProductListOut)
async def products_by_category(
    category: str,
    reco: RecoContext = Depends(reco_context),
):
    items = await reco.by_category(category)
    logger.info("Response: products_by_category category=%s count=%s", category, len(items))
    return product_list(items)


@router.post("/catalog/refresh")
async def refresh_catalog(reco: RecoContext = Depends(reco_context)):
    """
    Drop the catalog snapshot and fetch it again. The snapshot is otherwise
    kept for the lifetime of the process.
    """
    reco.cache.invalidate()
    products = await reco.cache.ensure_loaded()
    return {"loaded": reco.cache.loaded, "count": len(products)}
