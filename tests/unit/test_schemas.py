"""Tests for JSON schema generation and document checking."""

import json

import pytest

from flowcheck.schemas import DocumentValidator, SchemaGenerator


@pytest.fixture(scope="module")
def schemas():
    return SchemaGenerator().generate_all_schemas()


class TestSchemaGenerator:
    """Test SchemaGenerator."""

    def test_generates_both_document_types(self, schemas):
        assert set(schemas) == {"chatflow", "flow_json"}

    def test_metadata(self, schemas):
        chatflow = schemas["chatflow"]

        assert chatflow["$schema"] == "https://json-schema.org/draft/2020-12/schema"
        assert chatflow["$id"].endswith("/chatflow.v1.schema.json")
        assert chatflow["title"] == "flowcheck-chatflow-v1"
        assert chatflow["version"] == "1.0"

    def test_aliases_are_used(self, schemas):
        assert "projectId" in schemas["chatflow"]["properties"]

    def test_save_schemas(self, tmp_path):
        generator = SchemaGenerator()
        generator.generate_all_schemas()

        files = generator.save_schemas(tmp_path / "schemas")

        assert set(files) == {"chatflow", "flow_json"}
        saved = json.loads(files["flow_json"].read_text(encoding="utf-8"))
        assert saved["title"] == "flowcheck-flow-json-v1"

    def test_get_schema_generates_lazily(self):
        generator = SchemaGenerator()

        assert generator.get_schema("chatflow") is not None
        assert generator.get_schema("unknown") is None


class TestDocumentValidator:
    """Test DocumentValidator."""

    def test_schemas_are_valid(self, schemas):
        assert DocumentValidator(schemas).check_schemas() == []

    def test_valid_chatflow(self, schemas, rsvp_chatflow_document):
        assert DocumentValidator(schemas).validate_data(rsvp_chatflow_document, "chatflow") == []

    def test_valid_flow_json(self, schemas, flow_json_document):
        assert DocumentValidator(schemas).validate_data(flow_json_document, "flow_json") == []

    def test_edge_without_target(self, schemas, rsvp_chatflow_document):
        del rsvp_chatflow_document["edges"][0]["target"]

        errors = DocumentValidator(schemas).validate_data(rsvp_chatflow_document, "chatflow")

        assert len(errors) == 1
        assert "target" in errors[0].message
        assert errors[0].path == "$.edges[0]"

    def test_flow_json_without_version(self, schemas, flow_json_document):
        del flow_json_document["version"]

        errors = DocumentValidator(schemas).validate_data(flow_json_document, "flow_json")

        assert [str(error) for error in errors] == ["$: 'version' is a required property"]

    def test_unknown_document_type(self, schemas):
        errors = DocumentValidator(schemas).validate_data({}, "workflow")

        assert "No schema available" in errors[0].message

    def test_validate_file(self, schemas, tmp_path, rsvp_chatflow_document):
        path = tmp_path / "flow.json"
        path.write_text(json.dumps(rsvp_chatflow_document), encoding="utf-8")

        assert DocumentValidator(schemas).validate_file(path, "chatflow") == []

    def test_validate_missing_file(self, schemas, tmp_path):
        errors = DocumentValidator(schemas).validate_file(tmp_path / "missing.json", "chatflow")

        assert errors[0].message == "File does not exist"

    def test_validate_invalid_json_file(self, schemas, tmp_path):
        path = tmp_path / "flow.json"
        path.write_text("[", encoding="utf-8")

        errors = DocumentValidator(schemas).validate_file(path, "chatflow")

        assert errors[0].message.startswith("Invalid JSON")
