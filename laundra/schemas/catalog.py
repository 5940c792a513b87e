"""
Catalog and store configuration schemas.

Pydantic models for the records the shop configures in its settings
screens: garment categories, products with their base price, stain
treatments with their surcharge, and the store details printed on receipts.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _strip_required(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty or whitespace")
    return value.strip()


class Category(BaseModel):
    """Garment category (e.g. shirts, suits, bedding)."""

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Category name")


class Product(BaseModel):
    """Catalog product with its base cleaning price."""

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    category_id: Optional[str] = Field(None, max_length=100)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Product name")

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "prod_shirt",
                "name": "Shirt",
                "category_id": "cat_shirts",
                "price": "3.50",
            }
        }
    }


class StainType(BaseModel):
    """Stain treatment with its per-unit surcharge."""

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Stain type name")


class StoreSettingsSchema(BaseModel):
    """Store details as shown on receipts."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., max_length=50)
    address_line1: str = Field(..., max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    address_city: str = Field(..., max_length=100)
    address_postcode: str = Field(..., max_length=20)
    vat_number: str = Field(..., max_length=50)
    vat_rate: Decimal = Field(..., ge=0, le=100)
