"""Document validation against generated JSON schemas."""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from .generator import SchemaGenerator

logger = logging.getLogger(__name__)


class SchemaError:
    """Represents a schema validation error."""

    def __init__(self, path: str, message: str, schema_path: str = ""):
        self.path = path
        self.message = message
        self.schema_path = schema_path

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class DocumentValidator:
    """Validates chatflow and Flow JSON documents against their JSON schemas.

    This is the shape check the editor is expected to run before handing a
    document to the chatflow validator.
    """

    def __init__(self, schemas: dict[str, dict[str, Any]] | None = None):
        self.schemas = schemas or SchemaGenerator().generate_all_schemas()

    def validate_file(self, document_path: Path, document_type: str) -> list[SchemaError]:
        """Validate a document file against its schema.

        Args:
            document_path: Path to the JSON document
            document_type: 'chatflow' or 'flow_json'

        Returns:
            List of validation errors (empty if valid)
        """
        if not document_path.exists():
            return [SchemaError(str(document_path), "File does not exist")]

        try:
            with open(document_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return [SchemaError(str(document_path), f"Invalid JSON: {e}")]

        return self.validate_data(data, document_type)

    def validate_data(self, data: Any, document_type: str) -> list[SchemaError]:
        """Validate decoded document data against its schema."""
        schema = self.schemas.get(document_type)
        if not schema:
            return [SchemaError("data", f"No schema available for document type: {document_type}")]

        validator = jsonschema.Draft202012Validator(schema)
        errors = [
            SchemaError(error.json_path, error.message, "/".join(str(p) for p in error.schema_path))
            for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path)))
        ]

        logger.debug(f"{document_type} document has {len(errors)} schema errors")
        return errors

    def check_schemas(self) -> list[str]:
        """Validate that the schemas themselves are valid JSON Schema.

        Returns:
            List of problems (empty if all schemas are valid)
        """
        problems = []

        for schema_name, schema in self.schemas.items():
            try:
                jsonschema.Draft202012Validator.check_schema(schema)
                logger.debug(f"Schema {schema_name} is valid")
            except jsonschema.SchemaError as e:
                message = f"Schema {schema_name} is invalid: {e.message}"
                problems.append(message)
                logger.error(message)

        return problems
