"""
Presentation layer.

FastAPI routes, schemas and middleware.
"""
