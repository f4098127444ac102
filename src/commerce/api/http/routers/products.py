"""Product catalog endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, Response, status

from src.commerce.api.http.deps import get_current_user_id, get_product_service, require_admin
from src.commerce.core.exceptions import ConflictError, NotFoundError
from src.commerce.core.models.claims import TokenClaims
from src.commerce.core.models.product import (
    BulkVisibilityResult,
    ProductCreate,
    ProductRead,
    ProductSearch,
    ProductUpdate,
)
from src.commerce.core.services import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
def list_products(
    _: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> list[ProductRead]:
    return [ProductRead.from_entity(p) for p in service.list_all()]


@router.get("/search", response_model=list[ProductRead])
def search_products(
    name: str | None = Query(default=None),
    min_price: Decimal | None = Query(default=None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(default=None, alias="maxPrice", ge=0),
    availability: bool | None = Query(default=None),
    _: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> list[ProductRead]:
    """Search visible products; every supplied filter must match."""
    filters = ProductSearch(
        name=name, min_price=min_price, max_price=max_price, availability=availability
    )
    return [ProductRead.from_entity(p) for p in service.search(filters)]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: str,
    _: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> ProductRead:
    product = service.get_by_id(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return ProductRead.from_entity(product)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    request: Request,
    response: Response,
    owner_id: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> ProductRead:
    product = service.create(payload, owner_id)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return ProductRead.from_entity(product)


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    owner_id: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> Response:
    if payload.id != product_id:
        raise ConflictError(product_id, payload.id)

    if service.update(payload, owner_id) is None:
        raise NotFoundError("Product", product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: ProductService = Depends(get_product_service),
) -> Response:
    if not service.delete(product_id, owner_id):
        raise NotFoundError("Product", product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/soft-delete-by-owner/{user_id}", response_model=BulkVisibilityResult)
def soft_delete_by_owner(
    user_id: str,
    _: TokenClaims = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> BulkVisibilityResult:
    """Hide every product of ``user_id``. Repeating the call changes nothing."""
    return BulkVisibilityResult(user_id=user_id, affected=service.soft_delete_by_owner(user_id))


@router.post("/restore-by-owner/{user_id}", response_model=BulkVisibilityResult)
def restore_by_owner(
    user_id: str,
    _: TokenClaims = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
) -> BulkVisibilityResult:
    return BulkVisibilityResult(user_id=user_id, affected=service.restore_by_owner(user_id))
