"""
Product Models

Pydantic models for product and user records and their API payloads.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================
# Records
# ============================================

class User(BaseModel):
    """A catalog user"""
    id: int
    name: str


class Product(BaseModel):
    """A persisted product with resolved image paths"""
    id: int
    user_id: int
    product_name: str
    product_description: str = ""
    product_images: List[str] = Field(default_factory=list)
    compressed_product_images: List[str] = Field(default_factory=list)
    product_price: float = 0.0


class NewProduct(BaseModel):
    """Product fields ready for insertion (paths already resolved)"""
    user_id: int
    product_name: str
    product_description: str = ""
    product_images: List[str] = Field(default_factory=list)
    compressed_product_images: List[str] = Field(default_factory=list)
    product_price: float = 0.0


class ProductFilters(BaseModel):
    """Optional filters for product listing"""
    user_id: Optional[int] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    product_name: Optional[str] = None


# ============================================
# Request Models
# ============================================

class CreateProductRequest(BaseModel):
    """Request model for product creation. Images are remote URLs."""
    user_id: int = Field(..., description="Owning user ID")
    product_name: str = Field(..., description="Product name")
    product_description: str = Field("", description="Product description")
    product_images: List[str] = Field(default_factory=list, description="Remote image URLs")
    product_price: float = Field(0.0, description="Product price")


class CreateUserRequest(BaseModel):
    """Request model for user creation"""
    name: str = Field(..., description="User name")
