"""
Domain layer.

Pure models, exceptions and service interfaces with no framework
dependencies beyond pydantic.
"""
