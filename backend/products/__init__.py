"""
Products Module

Product and user records backed by SQLite, with image
acquisition delegated to the image pipeline.
"""

from .database import ProductDatabase
from .models import CreateProductRequest, NewProduct, Product, ProductFilters, User
from .routes import router
from .service import ProductService

__all__ = [
    "CreateProductRequest",
    "NewProduct",
    "Product",
    "ProductDatabase",
    "ProductFilters",
    "ProductService",
    "User",
    "router",
]
