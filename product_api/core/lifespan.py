# product_api/core/lifespan.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from product_api.db import mongo
from product_api.core.config import get_settings
from product_api.core.errors import ApiError
from product_api.domain.repositories.product_repo import ProductRepo
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    if not settings.API_KEY:
        logger.warning("API_KEY is not set: every request will be rejected with 403")

    await mongo.connect()
    repo = ProductRepo(mongo.get_db(), settings.products_collection)
    try:
        await repo.ensure_indexes()
        logger.info("Indexes ensured on '%s'", settings.products_collection)
    except ApiError as e:
        # retried on the first insert; queries report STORE_UNAVAILABLE while Mongo is down
        logger.warning("Could not ensure indexes at startup: %s", e.__cause__ or e)
    app.state.product_repo = repo

    # Application runs
    yield

    # --- Shutdown ---
    await mongo.disconnect()
    logger.info("Mongo disconnected")
