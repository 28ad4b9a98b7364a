"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB pool, schema
bootstrap, settings, logging, error envelope). Feature-specific SQL and
business logic live in the corresponding feature package (e.g. `schools/`).
"""
