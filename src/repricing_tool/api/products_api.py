"""
Products API - FastAPI router for product review and price suggestions.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..engine.errors import InvalidPriceError, ProductNotFoundError
from ..engine.models import ProductStatus
from ..engine.suggestions import suggest
from ..services.catalog_service import CatalogService
from ..config.settings import get_settings
from .state import get_catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["products"])

STATUS_FILTERS = {s.value for s in ProductStatus} | {'all'}


# Pydantic models for API
class ProductUpdate(BaseModel):
    """Request model for a partial product update."""
    new_price: Optional[float] = Field(default=None, gt=0)
    status: Optional[ProductStatus] = None
    manual_flag: Optional[bool] = None


class ProductResponse(BaseModel):
    """Response model for a product."""
    sku: str
    name: str
    stock: int
    cost_price: float
    current_price: float
    sales_qty: int
    abc_margin: str
    margin_total: float
    source_status: str
    new_price: Optional[float]
    status: ProductStatus
    batch_id: Optional[int]
    manual_flag: bool
    daily_loss: float


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int


class ProductPage(BaseModel):
    """Response model for a page of products."""
    data: list[ProductResponse]
    meta: PageMeta


class UpdateResponse(BaseModel):
    success: bool
    product: ProductResponse


class SuggestionResponse(BaseModel):
    """Response model for price suggestions."""
    current_price: float
    raw_price: float
    bracket: str
    suggestions: list[int]


# Endpoints

@router.get("/suggestions", response_model=SuggestionResponse)
async def get_suggestions(price: float = Query(..., description="Current price")):
    """Suggested round prices for an arbitrary current price."""
    try:
        return suggest(price, get_settings().markup).to_dict()
    except InvalidPriceError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/products", response_model=ProductPage)
def list_products(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size; defaults to the configured page size"),
    status: str = ProductStatus.PENDING.value,
    q: str = '',
    catalog: CatalogService = Depends(get_catalog_service),
):
    """List products with paging, status filter and search."""
    if status not in STATUS_FILTERS:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown status '{status}'. Use one of: {', '.join(sorted(STATUS_FILTERS))}",
        )
    try:
        return catalog.list_products(page=page, limit=limit, status=status, q=q)
    except Exception as e:
        logger.exception("Product query failed")
        raise HTTPException(status_code=500, detail=f"Query failed: {e}")


@router.patch("/products/{sku}", response_model=UpdateResponse)
def update_product(
    sku: str,
    updates: ProductUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Update new_price, status and/or manual_flag of a product."""
    # Only fields present in the body are applied; an explicit null clears new_price
    update_dict = updates.model_dump(exclude_unset=True)

    try:
        product = catalog.update_product(sku, update_dict)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"success": True, "product": product.to_dict()}


@router.get("/products/{sku}/suggestions", response_model=SuggestionResponse)
def get_product_suggestions(
    sku: str,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Suggested round prices for a stored product."""
    try:
        return catalog.suggestions_for(sku).to_dict()
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPriceError as e:
        raise HTTPException(status_code=422, detail=str(e))
