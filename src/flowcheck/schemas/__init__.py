"""JSON Schema generation and checking for flowcheck documents.

Schemas are generated from the Pydantic document models and used to check
documents with jsonschema before they are loaded.
"""

from .generator import SchemaGenerator
from .validator import DocumentValidator, SchemaError

__all__ = [
    "SchemaGenerator",
    "DocumentValidator",
    "SchemaError"
]
