"""Catalog use cases: public reads and owner-only mutations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from catalog_api.core.errors import ForbiddenError, NotFoundError
from catalog_api.db.models import Product
from catalog_api.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = {"description", "image_url"}


class ProductNotFoundError(NotFoundError):
    """Raised when a product id does not exist."""


class OwnershipError(ForbiddenError):
    """Raised when the caller does not own the product being mutated."""


@dataclass
class BulkDeleteResult:
    deleted_count: int
    deleted_ids: list[str]


class ProductService:
    """Product CRUD with ownership checks."""

    def __init__(self) -> None:
        self.repository = SQLRepository()

    def list_products(self, category: Optional[str] = None, owner_id: Optional[str] = None) -> list[Product]:
        return self.repository.list_products(
            category=(category or "").strip() or None,
            owner_id=(owner_id or "").strip() or None,
        )

    def get_product(self, product_id: str) -> Product:
        entity = self.repository.get_product((product_id or "").strip())
        if not entity:
            raise ProductNotFoundError("Product not found")
        return entity

    def _owned_product(self, product_id: str, user_id: str) -> Product:
        entity = self.get_product(product_id)
        if entity.owner_id != user_id:
            raise OwnershipError("Unauthorized")
        return entity

    def create_product(self, user_id: str, data: dict) -> Product:
        entity = self.repository.create_product(user_id, **data)
        logger.info("User %s created product %s", user_id, entity.id)
        return entity

    def update_product(self, product_id: str, user_id: str, data: dict) -> Product:
        entity = self._owned_product(product_id, user_id)
        data = {key: value for key, value in data.items() if value is not None or key in NULLABLE_FIELDS}
        if not data:
            return entity
        updated = self.repository.update_product(entity.id, **data)
        if not updated:
            raise ProductNotFoundError("Product not found")
        logger.info("User %s updated product %s", user_id, entity.id)
        return updated

    def delete_product(self, product_id: str, user_id: str) -> None:
        entity = self._owned_product(product_id, user_id)
        self.repository.delete_product(entity.id)
        logger.info("User %s deleted product %s", user_id, entity.id)

    def delete_products(self, product_ids: list[str], user_id: str) -> BulkDeleteResult:
        requested = list(dict.fromkeys(pid.strip() for pid in product_ids if pid and pid.strip()))
        owned = [p.id for p in self.repository.get_products_by_ids(requested) if p.owner_id == user_id]
        if not owned:
            raise ProductNotFoundError("No products found that belong to you with the provided IDs")
        unauthorized = [pid for pid in requested if pid not in owned]
        if unauthorized:
            raise OwnershipError(
                "You are not authorized to delete some of the requested products",
                unauthorized_ids=unauthorized,
            )
        deleted = self.repository.delete_products(owned, user_id)
        logger.info("User %s deleted %d products", user_id, deleted)
        return BulkDeleteResult(deleted_count=deleted, deleted_ids=owned)

    def delete_all_products(self, user_id: str) -> int:
        deleted = self.repository.delete_products_for_owner(user_id)
        logger.info("User %s deleted all of their %d products", user_id, deleted)
        return deleted
