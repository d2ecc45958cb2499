"""
Catalog Application

Builds the FastAPI app and wires the service handles
(storage, HTTP client, pipeline, database) at startup.

Run:
    cd backend
    python -m catalog.app
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from image_pipeline import Compressor, Fetcher, ImagePipeline, LocalStorage, PipelineConfig
from products import ProductDatabase, ProductService, router as products_router

from .settings import Settings, load_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_service(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> ProductService:
    """Construct the product service and everything it depends on."""
    storage = LocalStorage(settings.images_dir, settings.compressed_images_dir)
    fetcher = Fetcher(
        storage,
        client=client,
        timeout=settings.fetch_timeout_seconds,
        retries=settings.fetch_retries,
        retry_backoff=settings.fetch_retry_backoff_seconds,
        require_success_status=settings.require_success_status,
    )
    compressor = Compressor(
        storage,
        max_width=settings.max_image_width,
        quality=settings.jpeg_quality,
    )
    pipeline = ImagePipeline(
        storage,
        fetcher,
        compressor,
        PipelineConfig(
            max_concurrency=settings.pipeline_max_concurrency,
            cleanup_on_failure=settings.cleanup_on_failure,
        ),
    )
    database = ProductDatabase(settings.database_path)
    return ProductService(pipeline, database)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create the catalog application.

    Args:
        settings: Service settings (defaults to the environment)
        client: HTTP client for image downloads (created if omitted)
    """
    settings = settings or load_settings()
    service = build_service(settings, client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.pipeline.storage.ensure_roots()
        logger.info("[Catalog] Service started")
        yield
        await service.pipeline.fetcher.close()
        service.database.close()
        logger.info("[Catalog] Service stopped")

    app = FastAPI(title="Product Catalog", lifespan=lifespan)
    app.state.product_service = service

    @app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError):
        logger.error(f"[Catalog] Invalid request payload: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": "Invalid request payload"})

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "product-catalog"}

    app.include_router(products_router)
    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info(f"[Catalog] Server is running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
