# product_api/api/v1/routers/products.py

from fastapi import APIRouter, Depends, Query, status
from typing import Annotated, Any, Dict, List, Optional, Union
import time

from product_api.api.deps import product_repo
from product_api.api.validation import validate_product_create, validate_product_update
from product_api.api.v1.schemas.product import CategoryCountOut, MessageOut, ProductOut, ProductPageOut
from product_api.core.errors import not_found, validation_error
from product_api.domain.repositories.product_repo import ProductRepo

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

RepoDep = Annotated[ProductRepo, Depends(product_repo)]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@router.get(
    "",
    response_model=Union[ProductPageOut, List[ProductOut]],
    summary="List products, optionally filtered by category and paginated",
)
async def list_products(
    repo: RepoDep,
    category: Optional[str] = Query(None, description="Only products in this category"),
    page: Optional[int] = Query(None, ge=1, description="Page number (enables the paged envelope)"),
    limit: Optional[int] = Query(None, ge=1, description="Page size (enables the paged envelope)"),
):
    """
    Without page/limit: the full (optionally filtered) list.
    With either one: the paged envelope; the missing one takes its default.
    """
    if page is None and limit is None:
        products = await repo.list_all(category=category)
        return [p.to_doc() for p in products]

    page = page or DEFAULT_PAGE
    limit = limit or DEFAULT_LIMIT
    start_time = time.perf_counter()
    result = await repo.list_paged(page=page, limit=limit, category=category)
    logger.info(
        "Response: list_products category=%s page=%s limit=%s count=%s total=%s elapsed_time=%.4fs",
        category, page, limit, len(result.items), result.total_count, time.perf_counter() - start_time,
    )
    return result.to_wire()


@router.get("/search", response_model=List[ProductOut], summary="Case-insensitive search by name")
async def search_products(
    repo: RepoDep,
    name: Optional[str] = Query(None, description="Substring of the product name"),
):
    if not name:
        raise validation_error("Please provide a product name to search.")

    products = await repo.search(name)
    if not products:
        raise not_found("No matching products found.")
    return [p.to_doc() for p in products]


@router.get("/stats", response_model=List[CategoryCountOut], summary="Product count per category")
async def product_stats(repo: RepoDep):
    stats = await repo.stats_by_category()
    return [CategoryCountOut(id=category, count=count) for category, count in stats.items()]


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, repo: RepoDep):
    product = await repo.find_by_id(product_id)
    if product is None:
        raise not_found()
    return product.to_doc()


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    repo: RepoDep,
    body: Dict[str, Any] = Depends(validate_product_create),
):
    product = await repo.create(body)
    logger.info("Created product id=%s name=%r", product.id, product.name)
    return product.to_doc()


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: str,
    repo: RepoDep,
    body: Dict[str, Any] = Depends(validate_product_update),
):
    """Partial update: only the supplied fields are overwritten; id never changes."""
    product = await repo.update(product_id, body)
    if product is None:
        raise not_found()
    return product.to_doc()


@router.delete("/{product_id}", response_model=MessageOut)
async def delete_product(product_id: str, repo: RepoDep):
    if not await repo.delete(product_id):
        raise not_found()
    logger.info("Deleted product id=%s", product_id)
    return MessageOut(message="Product deleted successfully")
