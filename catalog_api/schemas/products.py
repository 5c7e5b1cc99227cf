from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Upper bound of a signed 32-bit INTEGER column
MAX_QUANTITY = 2**31 - 1
MAX_PRICE = 1_000_000_000_000


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0, le=MAX_PRICE, allow_inf_nan=False)
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY)
    category: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)


class ProductPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    quantity: Optional[int] = Field(None, ge=0, le=MAX_QUANTITY)
    category: Optional[str] = Field(None, min_length=1, max_length=128)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    price: float
    quantity: int
    category: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeleteMultipleSchema(BaseModel):
    product_ids: List[str] = Field(..., min_length=1)


class DeleteResult(BaseModel):
    message: str
    deleted_count: int
    deleted_ids: Optional[List[str]] = None


class PriceConversionOut(BaseModel):
    product_id: str
    product_name: str
    original_price: float
    base_currency: str
    currency: str
    converted_price: float
    exchange_rate: float
