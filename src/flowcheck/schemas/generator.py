"""JSON Schema generation from Pydantic models for flowcheck documents."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ..models.chatflow import Chatflow
from ..models.whatsapp_flow import FlowJSON

logger = logging.getLogger(__name__)

SCHEMA_BASE_URI = "https://kabar.in/schemas/flowcheck"


class SchemaGenerator:
    """Generates JSON schemas from Pydantic models for document checking."""

    def __init__(self):
        self.schemas: dict[str, dict[str, Any]] = {}

    def generate_all_schemas(self) -> dict[str, dict[str, Any]]:
        """Generate JSON schemas for all document types.

        Returns:
            Dictionary mapping document types to JSON schemas
        """
        logger.info("Generating JSON schemas for flowcheck documents")

        self.schemas = {
            "chatflow": self._model_to_schema(
                Chatflow,
                "flowcheck-chatflow-v1",
                "JSON Schema for chatflow documents (nodes and edges)",
                f"{SCHEMA_BASE_URI}/chatflow.v1.schema.json"
            ),
            "flow_json": self._model_to_schema(
                FlowJSON,
                "flowcheck-flow-json-v1",
                "JSON Schema for WhatsApp Flow JSON documents",
                f"{SCHEMA_BASE_URI}/flow-json.v1.schema.json"
            ),
        }

        logger.info(f"Generated {len(self.schemas)} JSON schemas")
        return self.schemas

    def save_schemas(self, output_dir: Path) -> dict[str, Path]:
        """Save generated schemas to files.

        Args:
            output_dir: Directory to save schema files

        Returns:
            Dictionary mapping schema names to file paths
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        schema_files = {}

        for schema_name, schema in self.schemas.items():
            schema_file = output_dir / f"{schema_name}.schema.json"

            with open(schema_file, "w", encoding="utf-8") as f:
                json.dump(schema, f, indent=2, ensure_ascii=False)

            schema_files[schema_name] = schema_file
            logger.debug(f"Saved schema: {schema_file}")

        return schema_files

    def get_schema(self, document_type: str) -> dict[str, Any] | None:
        """Get JSON schema for a document type, generating schemas on first use."""
        if not self.schemas:
            self.generate_all_schemas()
        return self.schemas.get(document_type)

    def _model_to_schema(
        self,
        model_class: type[BaseModel],
        title: str,
        description: str,
        schema_id: str
    ) -> dict[str, Any]:
        """Convert Pydantic model to JSON schema."""
        schema = model_class.model_json_schema()

        schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
        schema["$id"] = schema_id
        schema["title"] = title
        schema["description"] = description
        schema["version"] = "1.0"

        return schema
