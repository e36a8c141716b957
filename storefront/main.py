"""
FastAPI Application Entry Point - Storefront Service
"""
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront import __version__
from storefront.config import settings, setup_logging
from storefront.database import init_db
from storefront.exceptions import StorefrontError
from storefront.api import admin, checkout, health, orders, products, webhooks

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Storefront Service",
    description="Product catalog, Stripe checkout and order service for the Water Blob Store",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    """Map the error taxonomy to JSON error bodies"""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (404, 405) use the same error shape"""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last resort: log the cause, return a generic message"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"error": "Internal server error"}
    if settings.ENVIRONMENT == "development":
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(health.router)
app.include_router(products.router)
app.include_router(checkout.router)
app.include_router(orders.router)
app.include_router(webhooks.router)
app.include_router(admin.router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


def mount_frontend(app: FastAPI, frontend_dir: str) -> bool:
    """Serve the static storefront, falling back to index.html for page routes"""
    root = Path(frontend_dir)
    if not root.is_dir():
        logger.warning("Frontend directory does not exist: %s", root)
        return False

    index = root / "index.html"

    @app.get("/{path:path}", include_in_schema=False)
    def serve_frontend(path: str):
        if path.startswith("api/"):
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        candidate = (root / path).resolve()
        if path and candidate.is_file() and candidate.is_relative_to(root.resolve()):
            return FileResponse(candidate)
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"error": "index.html not found"})

    return True


if settings.FRONTEND_DIR:
    mount_frontend(app, settings.FRONTEND_DIR)


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    setup_logging()
    logger.info("Starting %s...", settings.SERVICE_NAME)
    init_db()
    logger.info("✓ Database initialized")
    logger.info("✓ Frontend URL: %s", settings.FRONTEND_URL)
    logger.info("✓ %s is running on port %s", settings.SERVICE_NAME, settings.SERVICE_PORT)


@app.on_event("shutdown")
def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down %s...", settings.SERVICE_NAME)


def run():
    """Run the service with uvicorn"""
    import uvicorn

    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT)


if __name__ == "__main__":
    run()
