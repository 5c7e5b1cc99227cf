from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from catalog_api.db.models import User
from catalog_api.schemas.products import (
    DeleteMultipleSchema,
    DeleteResult,
    PriceConversionOut,
    ProductIn,
    ProductOut,
    ProductPatch,
)
from catalog_api.services.currency_service import CurrencyService
from catalog_api.services.product_service import ProductService
from catalog_api.services.session_service import current_user

router = APIRouter(prefix="/api/products", tags=["products"])
product_service = ProductService()


def get_currency_service() -> CurrencyService:
    return CurrencyService(products=product_service)


@router.get("/", response_model=List[ProductOut])
def list_products(category: Optional[str] = None, owner_id: Optional[str] = None):
    return product_service.list_products(category=category, owner_id=owner_id)


# Static paths come before /{product_id} so they are not captured as ids.
@router.delete("/delete-multiple", response_model=DeleteResult)
def delete_multiple(data: DeleteMultipleSchema, user: User = Depends(current_user)):
    result = product_service.delete_products(data.product_ids, user.id)
    return {
        "message": "Products deleted successfully",
        "deleted_count": result.deleted_count,
        "deleted_ids": result.deleted_ids,
    }


@router.delete("/delete-all", response_model=DeleteResult, response_model_exclude_none=True)
def delete_all(user: User = Depends(current_user)):
    deleted = product_service.delete_all_products(user.id)
    message = "All products deleted successfully" if deleted > 0 else "No products found to delete"
    return {"message": message, "deleted_count": deleted}


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str):
    return product_service.get_product(product_id)


@router.get("/{product_id}/price-in/{currency}", response_model=PriceConversionOut)
def price_in_currency(product_id: str, currency: str, service: CurrencyService = Depends(get_currency_service)):
    return service.convert_product_price(product_id, currency)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(data: ProductIn, user: User = Depends(current_user)):
    return product_service.create_product(user.id, data.model_dump())


@router.put("/{product_id}", response_model=ProductOut)
def replace_product(product_id: str, data: ProductIn, user: User = Depends(current_user)):
    return product_service.update_product(product_id, user.id, data.model_dump())


@router.patch("/{product_id}", response_model=ProductOut)
def patch_product(product_id: str, data: ProductPatch, user: User = Depends(current_user)):
    return product_service.update_product(product_id, user.id, data.model_dump(exclude_unset=True))


@router.delete("/{product_id}")
def delete_product(product_id: str, user: User = Depends(current_user)):
    product_service.delete_product(product_id, user.id)
    return {"message": "Product deleted successfully"}
