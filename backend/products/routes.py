"""
Product API Routes

Provides endpoints for:
- Creating products (downloads and compresses their images)
- Fetching a single product
- Listing products with optional filters
- Creating and fetching users
"""

import logging
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from image_pipeline import PipelineError

from .models import CreateProductRequest, CreateUserRequest, Product, ProductFilters, User
from .service import ProductService

logger = logging.getLogger(__name__)


def get_product_service(request: Request) -> ProductService:
    """Service handle injected at application startup."""
    return request.app.state.product_service


# ============================================
# Router
# ============================================

router = APIRouter(tags=["Products"])


# ============================================
# Product Endpoints
# ============================================

@router.post("/products", response_model=Product, status_code=201)
async def create_product(
    request: CreateProductRequest,
    service: ProductService = Depends(get_product_service),
):
    """
    Create a product.

    Every image URL is downloaded and compressed before the product is
    stored. If any image fails, nothing is stored.

    Example:
        POST /products
        {
            "user_id": 1,
            "product_name": "Lamp",
            "product_description": "Desk lamp",
            "product_images": ["https://example.com/lamp.jpg"],
            "product_price": 19.99
        }
    """
    try:
        return await service.create_product(request)
    except PipelineError as e:
        logger.error(f"[Products] Image processing error: {e.message} {e.context()}")
        raise HTTPException(status_code=500, detail="Failed to process images")
    except sqlite3.Error as e:
        logger.error(f"[Products] Database error while creating product: {e}")
        raise HTTPException(status_code=500, detail="Failed to create product")


@router.get("/products/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    """Get a single product by ID."""
    product = service.get_product(product_id)
    if not product:
        logger.error(f"[Products] Product not found: {product_id}")
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info(f"[Products] Product retrieved: {product_id}")
    return product


@router.get("/products", response_model=List[Product])
async def list_products(
    user_id: Optional[int] = Query(None, description="Owning user ID"),
    min_price: Optional[float] = Query(None, description="Minimum price (inclusive)"),
    max_price: Optional[float] = Query(None, description="Maximum price (inclusive)"),
    product_name: Optional[str] = Query(None, description="Case-insensitive name substring"),
    service: ProductService = Depends(get_product_service),
):
    """
    List products.

    Example:
        GET /products?user_id=1&min_price=10&product_name=lamp
    """
    filters = ProductFilters(
        user_id=user_id,
        min_price=min_price,
        max_price=max_price,
        product_name=product_name,
    )
    try:
        products = service.list_products(filters)
    except sqlite3.Error as e:
        logger.error(f"[Products] Failed to retrieve products: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve products")

    logger.info(f"[Products] Products retrieved: count={len(products)}")
    return products


# ============================================
# User Endpoints
# ============================================

@router.post("/users", response_model=User, status_code=201)
async def create_user(
    request: CreateUserRequest,
    service: ProductService = Depends(get_product_service),
):
    """Create a user."""
    try:
        return service.create_user(request.name)
    except sqlite3.Error as e:
        logger.error(f"[Products] Database error while creating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("/users/{user_id}", response_model=User)
async def get_user(
    user_id: int,
    service: ProductService = Depends(get_product_service),
):
    """Get a single user by ID."""
    user = service.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
