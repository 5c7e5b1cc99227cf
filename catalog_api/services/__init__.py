"""
High-level use cases for the catalog API.

Each service module orchestrates the repository and adapters to implement
business rules (register, reset a password, check product ownership, convert
a price, etc.).

Routers (FastAPI endpoints) call these services instead of opening database
sessions directly.
"""
