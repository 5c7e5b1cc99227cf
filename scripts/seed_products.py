#!/usr/bin/env python3
"""
Load the sample catalogue into the configured database.

Usage:
  python scripts/seed_products.py [--email demo@example.com] [--username demouser] [--password secret123] [--reset]
"""
from __future__ import annotations

import argparse
import logging
import sys

from catalog_api.core.logging_config import configure_logging
from catalog_api.core.security import hash_password
from catalog_api.db.create_tables import create_all
from catalog_api.repositories.sql_repository import SQLRepository

logger = logging.getLogger("seed_products")

SAMPLE_PRODUCTS = [
    {"name": "iPhone 14 Pro", "price": 999, "quantity": 50, "description": "Latest iPhone with advanced camera system", "category": "Electronics"},
    {"name": "Nike Air Max 270", "price": 150, "quantity": 100, "description": "Comfortable running shoes with air cushioning", "category": "Footwear"},
    {"name": "Samsung 4K TV", "price": 800, "quantity": 25, "description": "55-inch 4K Ultra HD Smart TV", "category": "Electronics"},
    {"name": "Levi's 501 Jeans", "price": 80, "quantity": 200, "description": "Classic straight-fit jeans", "category": "Clothing"},
    {"name": "MacBook Pro 16", "price": 2499, "quantity": 30, "description": "Professional laptop with M2 chip", "category": "Electronics"},
    {"name": "Coffee Maker", "price": 120, "quantity": 75, "description": "Programmable drip coffee maker", "category": "Home & Kitchen"},
    {"name": "Gaming Chair", "price": 250, "quantity": 40, "description": "Ergonomic gaming chair with lumbar support", "category": "Furniture"},
    {"name": "Wireless Headphones", "price": 200, "quantity": 60, "description": "Noise-cancelling over-ear headphones", "category": "Electronics"},
]


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed the catalogue with sample products")
    ap.add_argument("--email", default="demo@example.com", help="Owner e-mail (created when missing)")
    ap.add_argument("--username", default="demouser", help="Owner username (6-15 chars)")
    ap.add_argument("--password", default="demo1234", help="Owner password when the user is created")
    ap.add_argument("--reset", action="store_true", help="Delete the owner's products before seeding")
    args = ap.parse_args()

    configure_logging()
    create_all()
    repo = SQLRepository()

    email = (args.email or "").strip().lower()
    if not email:
        raise SystemExit("Invalid e-mail")
    owner = repo.get_user_by_email(email)
    if not owner:
        username = (args.username or "").strip()
        if not 6 <= len(username) <= 15:
            raise SystemExit("Username must have 6-15 characters")
        if repo.get_user_by_username(username):
            raise SystemExit(f"Username '{username}' is already taken")
        owner = repo.create_user(username, email, hash_password(args.password), email_verified=True)
        logger.info("Created demo user %s", owner.id)

    if args.reset:
        removed = repo.delete_products_for_owner(owner.id)
        logger.info("Removed %d existing products", removed)

    for item in SAMPLE_PRODUCTS:
        repo.create_product(owner.id, **item)
    print(f"OK: {len(SAMPLE_PRODUCTS)} products seeded")
    print(f"  Owner: {owner.email} ({owner.id})")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
