# product_api/domain/repositories/product_repo.py

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import math
import re

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from product_api.core.errors import store_unavailable, validation_error
from product_api.domain.models.product import Product, ProductPage, ProductUpdate

logger = logging.getLogger(__name__)

# Never leak Mongo's internal key to callers
NO_MONGO_ID = {"_id": 0}


def _first_problem(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


class ProductRepo:
    """
    Product store backed by the 'products' collection.
    Products are keyed by their own 'id' attribute, never by Mongo's '_id'.
    Driver failures surface as ApiError(STORE_UNAVAILABLE); no retries here.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]
        self.indexes_ready = False

    async def ensure_indexes(self) -> None:
        try:
            await self.col.create_index([("id", ASCENDING)], unique=True, name="uniq_product_id")
            await self.col.create_index([("category", ASCENDING)], name="category")
        except PyMongoError as e:
            raise store_unavailable() from e
        self.indexes_ready = True

    # ----- Reads --------------------------------------------------------------

    @staticmethod
    def _category_filter(category: Optional[str]) -> Dict[str, Any]:
        return {"category": category} if category else {}

    async def _find(self, query: Dict[str, Any], *, skip: int = 0, limit: int = 0) -> List[Product]:
        # insertion order via _id keeps pages stable between requests
        cursor = self.col.find(query, NO_MONGO_ID, sort=[("_id", ASCENDING)], skip=skip, limit=limit)
        try:
            return [Product.model_validate(doc) async for doc in cursor]
        except PyMongoError as e:
            raise store_unavailable() from e

    async def list_all(self, category: Optional[str] = None) -> List[Product]:
        return await self._find(self._category_filter(category))

    async def list_paged(self, page: int, limit: int, category: Optional[str] = None) -> ProductPage:
        """
        One page of products plus counts. Pages past the end come back empty,
        the counts are still correct.
        """
        if page < 1 or limit < 1:
            raise validation_error("page and limit must be positive integers.")

        query = self._category_filter(category)
        try:
            total = await self.col.count_documents(query)
        except PyMongoError as e:
            raise store_unavailable() from e

        items = await self._find(query, skip=(page - 1) * limit, limit=limit)
        return ProductPage(
            items=items,
            total_count=total,
            total_pages=math.ceil(total / limit),
            page=page,
            limit=limit,
        )

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        try:
            doc = await self.col.find_one({"id": product_id}, NO_MONGO_ID)
        except PyMongoError as e:
            raise store_unavailable() from e
        return Product.model_validate(doc) if doc else None

    async def search(self, name_fragment: str) -> List[Product]:
        """Case-insensitive literal substring match on name."""
        pattern = re.escape(name_fragment)
        return await self._find({"name": {"$regex": pattern, "$options": "i"}})

    async def stats_by_category(self) -> Dict[str, int]:
        pipeline: List[Dict[str, Any]] = [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]
        try:
            cursor = self.col.aggregate(pipeline)
            return {doc["_id"]: doc["count"] async for doc in cursor}
        except PyMongoError as e:
            raise store_unavailable() from e

    # ----- Writes -------------------------------------------------------------

    async def create(self, fields: Dict[str, Any]) -> Product:
        """
        Re-validates the invariants (price > 0, non-empty name/category)
        even though the request layer already checked them.
        """
        try:
            product = Product.model_validate(fields)
        except ValidationError as e:
            raise validation_error(_first_problem(e)) from e

        if not self.indexes_ready:
            # startup could not reach Mongo; without the unique index ids could repeat
            await self.ensure_indexes()

        try:
            # insert a copy: insert_one adds '_id' to the document it is given
            await self.col.insert_one(dict(product.to_doc()))
        except DuplicateKeyError as e:
            raise validation_error(f"Product with id '{product.id}' already exists.") from e
        except PyMongoError as e:
            raise store_unavailable() from e

        logger.debug("Created product id=%s category=%s", product.id, product.category)
        return product

    async def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        """
        Overwrite only the supplied mutable fields. 'id' and unknown keys are ignored.
        Returns None when no product has this id.
        """
        try:
            changes = ProductUpdate.model_validate(fields).to_set()
        except ValidationError as e:
            raise validation_error(_first_problem(e)) from e

        if not changes:
            return await self.find_by_id(product_id)

        try:
            doc = await self.col.find_one_and_update(
                {"id": product_id},
                {"$set": changes},
                projection=NO_MONGO_ID,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise store_unavailable() from e

        if not doc:
            return None
        logger.debug("Updated product id=%s fields=%s", product_id, sorted(changes))
        return Product.model_validate(doc)

    async def delete(self, product_id: str) -> bool:
        try:
            res = await self.col.delete_one({"id": product_id})
        except PyMongoError as e:
            raise store_unavailable() from e
        return res.deleted_count == 1

