"""Product catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_products, require_collections
from src.application.dto.requests import ProductRequest
from src.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from src.core.entities import Workspace
from src.core.services import ProductManager

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    q: str | None = Query(default=None, description="Filter by name or category"),
    workspace: Workspace = Depends(require_collections("products")),
    manager: ProductManager = Depends(get_products),
) -> ProductListResponse:
    """List the catalog, newest first."""
    products = manager.search(workspace, q) if q else manager.list_records(workspace)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        total=len(products),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_product(
    request: ProductRequest,
    workspace: Workspace = Depends(require_collections("products")),
    manager: ProductManager = Depends(get_products),
) -> ProductResponse:
    product = await manager.add(workspace, request.to_entity())
    return ProductResponse.model_validate(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: str,
    request: ProductRequest,
    workspace: Workspace = Depends(require_collections("products")),
    manager: ProductManager = Depends(get_products),
) -> ProductResponse:
    """Replace a product. Existing invoices keep their line snapshots."""
    product = await manager.update(workspace, request.to_entity(product_id))
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", response_model=DeleteResponse)
async def delete_product(
    product_id: str,
    workspace: Workspace = Depends(require_collections("products")),
    manager: ProductManager = Depends(get_products),
) -> DeleteResponse:
    deleted = await manager.delete(workspace, product_id)
    return DeleteResponse(id=product_id, deleted=deleted)
