"""
Storefront Service.

Single-entry request handler for a small storefront backend, following the
three-layer architecture pattern:

- handlers: Lambda entry point, action dispatch, request/response handling
- logic: Orders, catalog, login and demo seeding
- dal: Record store over the shared (context, id) table
- models: Record keys and action input/output models
- security: Bearer tokens and credential comparison
"""

__version__ = "1.0.0"
