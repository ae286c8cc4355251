"""
api/products.py
---------------
Product endpoints. Maps repository results onto HTTP status codes:
absent reads and False writes become 404, an id mismatch on update is 400.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse

from api.deps import get_export_service, get_repository
from api.schemas import (
    PriceUpdate,
    ProductCreated,
    ProductIn,
    ProductOut,
    ProductUpdate,
    StockSummary,
)
from config import LOW_STOCK_THRESHOLD
from repositories.product_repo import ProductRepository
from services.export_service import ExportService


router = APIRouter(prefix="/api/products", tags=["products"])

_EXPORT_TYPES = {
    "csv": ("text/csv", "products.csv"),
    "xlsx": (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "products.xlsx",
    ),
}


def _not_found(product_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Product {product_id} not found")


@router.get("", response_model=list[ProductOut])
def list_products(repo: ProductRepository = Depends(get_repository)) -> list[ProductOut]:
    """List all products, ordered by name."""
    return [ProductOut.model_validate(p) for p in repo.get_all()]


@router.get("/low-stock", response_model=list[ProductOut])
def list_low_stock(
    minimum: int = Query(LOW_STOCK_THRESHOLD),
    repo: ProductRepository = Depends(get_repository),
) -> list[ProductOut]:
    """List products with stock at or below `minimum`."""
    return [ProductOut.model_validate(p) for p in repo.get_with_low_stock(minimum)]


@router.get("/with-categories", response_model=list[ProductOut])
def list_with_categories(repo: ProductRepository = Depends(get_repository)) -> list[ProductOut]:
    """List products that have a category, with the category embedded."""
    return [ProductOut.model_validate(p) for p in repo.get_with_categories()]


@router.get("/summary", response_model=StockSummary)
def stock_summary(repo: ProductRepository = Depends(get_repository)) -> StockSummary:
    """Product count and total stock value."""
    return StockSummary(count=repo.count_total(), total_stock_value=repo.get_total_stock_value())


@router.get("/export")
def export_products(
    fmt: Literal["csv", "xlsx"] = Query("csv", alias="format"),
    exporter: ExportService = Depends(get_export_service),
) -> StreamingResponse:
    """Download the inventory as CSV or Excel."""
    buffer = exporter.export_csv() if fmt == "csv" else exporter.export_excel()
    media_type, filename = _EXPORT_TYPES[fmt]
    return StreamingResponse(
        buffer,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, repo: ProductRepository = Depends(get_repository)) -> ProductOut:
    """Get a product by ID."""
    product = repo.get_by_id(product_id)
    if product is None:
        raise _not_found(product_id)
    return ProductOut.model_validate(product)


@router.post("", response_model=ProductCreated, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductIn,
    response: Response,
    repo: ProductRepository = Depends(get_repository),
) -> ProductCreated:
    """Create a product; the store assigns its id."""
    product_id = repo.add(body.to_product())
    response.headers["Location"] = f"{router.prefix}/{product_id}"
    return ProductCreated(id=product_id, message="Product created")


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_product(
    product_id: int,
    body: ProductUpdate,
    repo: ProductRepository = Depends(get_repository),
) -> Response:
    """Replace name, price and stock of a product."""
    if body.id != product_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product id does not match the path")
    if not repo.update(body.to_product(product_id)):
        raise _not_found(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{product_id}/price", status_code=status.HTTP_204_NO_CONTENT)
def update_price(
    product_id: int,
    body: PriceUpdate,
    repo: ProductRepository = Depends(get_repository),
) -> Response:
    """Change only the price of a product."""
    if not repo.update_price(product_id, body.price):
        raise _not_found(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, repo: ProductRepository = Depends(get_repository)) -> Response:
    """Delete a product."""
    if not repo.delete(product_id):
        raise _not_found(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
