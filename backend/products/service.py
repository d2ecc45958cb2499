"""
Product Service

Runs the image pipeline for new products and normalizes image
paths on every record that leaves the service.
"""

import logging
from typing import List, Optional

from image_pipeline import ImagePipeline, create_product_images, normalize_paths

from .database import ProductDatabase
from .models import CreateProductRequest, NewProduct, Product, ProductFilters, User

logger = logging.getLogger(__name__)


def _with_normalized_paths(product: Product) -> Product:
    return product.model_copy(update={
        "product_images": normalize_paths(product.product_images),
        "compressed_product_images": normalize_paths(product.compressed_product_images),
    })


class ProductService:
    """
    Usage:
        service = ProductService(pipeline, database)
        product = await service.create_product(request)
    """

    def __init__(self, pipeline: ImagePipeline, database: ProductDatabase):
        self.pipeline = pipeline
        self.database = database

    async def create_product(self, request: CreateProductRequest) -> Product:
        """
        Download and compress the product's images, then persist it.

        Raises:
            PipelineError: image processing failed; nothing was persisted.
        """
        logger.info(
            f"[Products] Creating product {request.product_name!r} "
            f"for user {request.user_id} ({len(request.product_images)} images)"
        )

        image_set = await create_product_images(self.pipeline, request.product_images)

        product = self.database.create_product(NewProduct(
            user_id=request.user_id,
            product_name=request.product_name,
            product_description=request.product_description,
            product_images=image_set.originals,
            compressed_product_images=image_set.derived,
            product_price=request.product_price,
        ))

        logger.info(f"[Products] Product created: id={product.id} user_id={product.user_id}")
        return product

    def get_product(self, product_id: int) -> Optional[Product]:
        product = self.database.get_product(product_id)
        return _with_normalized_paths(product) if product else None

    def list_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        products = self.database.list_products(filters)
        return [_with_normalized_paths(p) for p in products]

    def create_user(self, name: str) -> User:
        return self.database.create_user(name)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.database.get_user(user_id)
