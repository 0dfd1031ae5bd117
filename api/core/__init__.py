"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that feature packages use (DB wiring,
settings, logging, error types). Keep product-specific SQL and validation
in `products/`.
"""
