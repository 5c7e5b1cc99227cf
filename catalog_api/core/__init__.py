"""
Core utilities shared across the catalog API.

This package hosts configuration, logging setup, password hashing and bearer
tokens, the mailer adapter, rate limiting and the error types that services
raise. Services depend on these primitives instead of reading os.environ or
talking to SMTP directly.
"""
