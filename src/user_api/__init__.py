"""User lifecycle API.

Create, replace-or-insert, patch, delete and page through user accounts
over HTTP, backed by an in-memory or SQL user store.
"""
