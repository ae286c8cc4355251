"""
api/app.py
----------
FastAPI application factory.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.products import router as products_router
from exceptions import RepositoryError
from repositories.product_repo import ProductRepository
from utils.logger import get_logger

logger = get_logger(__name__)


async def _repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    # Already logged with full detail by the repository.
    logger.warning(f"{request.method} {request.url.path} -> 503 ({exc.operation})")
    return JSONResponse(status_code=503, content={"detail": "Storage is unavailable, try again later."})


def create_app(repository: ProductRepository) -> FastAPI:
    """
    Build the application around an already-configured repository.

    Args:
        repository: Shared, stateless product repository.
    """
    app = FastAPI(title="Product Stock API")
    app.state.repository = repository
    app.add_exception_handler(RepositoryError, _repository_error_handler)
    app.include_router(products_router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        """Liveness probe; does not touch the database."""
        return {"status": "healthy"}

    return app
