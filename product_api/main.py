from fastapi import FastAPI
from product_api.core.config import get_settings
from product_api.core.lifespan import lifespan
from product_api.core.errors import register_error_handlers
from product_api.core.logging import configure_logging
from product_api.api.middleware import ApiKeyMiddleware, RequestLoggingMiddleware
from product_api.api.v1.routers.root import router as root_router
from product_api.api.v1.routers.products import router as products_router
from product_api.api.v1.routers.health import router as health_router

import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- Middleware -------
# Last added runs first: logging -> api key -> routes
app.add_middleware(ApiKeyMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# ------- Errors -------
register_error_handlers(app)

# ------- Routes -------
app.include_router(root_router)
app.include_router(health_router)
app.include_router(products_router, prefix=settings.api_prefix)   # /api/products
