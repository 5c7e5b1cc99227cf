"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, or_, select, update

from catalog_api.db.models import Product, User
from catalog_api.db.session import get_session

USER_MUTABLE_FIELDS = {"username", "email", "email_verified"}
PRODUCT_MUTABLE_FIELDS = {"name", "price", "quantity", "category", "description", "image_url"}


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def create_user(self, username: str, email: str, password_hash: str, *, email_verified: bool = False) -> User:
        now = datetime.now(timezone.utc)
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            email_verified=email_verified,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def get_user_by_username(self, username: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.username == username)
            return session.execute(stmt).scalar_one_or_none()

    def find_user_by_identity(self, email: str, username: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(or_(User.email == email, User.username == username)).limit(1)
            return session.execute(stmt).scalars().first()

    def update_user(self, user_id: str, **fields) -> Optional[User]:
        values = {key: value for key, value in fields.items() if key in USER_MUTABLE_FIELDS}
        with get_session() as session:
            user = session.get(User, user_id)
            if not user:
                return None
            for key, value in values.items():
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(user)
            return user

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def set_user_verified(self, user_id: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(
                    email_verified=True,
                    verification_token=None,
                    verification_expires_at=None,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            session.execute(stmt)
            session.commit()

    def delete_user(self, user_id: str) -> None:
        with get_session() as session:
            session.execute(delete(Product).where(Product.owner_id == user_id))
            session.execute(delete(User).where(User.id == user_id))
            session.commit()

    # -------------------------- tokens --------------------------
    def set_verification_token(self, user_id: str, token: str, expires_at: datetime) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(verification_token=token, verification_expires_at=expires_at)
            )
            session.execute(stmt)
            session.commit()

    def clear_verification_token(self, user_id: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(verification_token=None, verification_expires_at=None)
            )
            session.execute(stmt)
            session.commit()

    def get_user_by_verification_token(self, token: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.verification_token == token)
            return session.execute(stmt).scalar_one_or_none()

    def set_password_reset_token(self, user_id: str, token: str, expires_at: datetime) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_reset_token=token, password_reset_expires_at=expires_at)
            )
            session.execute(stmt)
            session.commit()

    def clear_password_reset_token(self, user_id: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_reset_token=None, password_reset_expires_at=None)
            )
            session.execute(stmt)
            session.commit()

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.password_reset_token == token)
            return session.execute(stmt).scalar_one_or_none()

    # -------------------------- products --------------------------
    def create_product(self, owner_id: str, **fields) -> Product:
        now = datetime.now(timezone.utc)
        values = {key: value for key, value in fields.items() if key in PRODUCT_MUTABLE_FIELDS}
        entity = Product(owner_id=owner_id, created_at=now, updated_at=now, **values)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_product(self, product_id: str) -> Optional[Product]:
        if not product_id:
            return None
        with get_session() as session:
            return session.get(Product, product_id)

    def list_products(self, *, category: str | None = None, owner_id: str | None = None) -> list[Product]:
        stmt = select(Product)
        if category:
            stmt = stmt.where(Product.category == category)
        if owner_id:
            stmt = stmt.where(Product.owner_id == owner_id)
        stmt = stmt.order_by(Product.created_at, Product.id)
        with get_session() as session:
            return session.execute(stmt).scalars().all()

    def update_product(self, product_id: str, **fields) -> Optional[Product]:
        values = {key: value for key, value in fields.items() if key in PRODUCT_MUTABLE_FIELDS}
        with get_session() as session:
            entity = session.get(Product, product_id)
            if not entity:
                return None
            for key, value in values.items():
                setattr(entity, key, value)
            entity.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(entity)
            return entity

    def delete_product(self, product_id: str) -> None:
        with get_session() as session:
            session.execute(delete(Product).where(Product.id == product_id))
            session.commit()

    def get_products_by_ids(self, product_ids: Iterable[str]) -> list[Product]:
        ids = list(product_ids)
        if not ids:
            return []
        with get_session() as session:
            stmt = select(Product).where(Product.id.in_(ids))
            return session.execute(stmt).scalars().all()

    def delete_products(self, product_ids: Iterable[str], owner_id: str) -> int:
        ids = list(product_ids)
        if not ids:
            return 0
        with get_session() as session:
            stmt = delete(Product).where(Product.id.in_(ids), Product.owner_id == owner_id)
            result = session.execute(stmt)
            session.commit()
            return int(result.rowcount or 0)

    def delete_products_for_owner(self, owner_id: str) -> int:
        with get_session() as session:
            result = session.execute(delete(Product).where(Product.owner_id == owner_id))
            session.commit()
            return int(result.rowcount or 0)
