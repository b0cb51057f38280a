"""
Tests for $ref resolution.
"""

import json
from pathlib import Path

import pytest

from json_schema_to_ts.pipeline import PipelineGenerator, ResolverError
from json_schema_to_ts.pipeline.analyzer import ReferenceResolver

SCHEMAS_DIR = Path(__file__).parent / "test_data" / "schemas"


@pytest.fixture
def resolver():
    return ReferenceResolver(SCHEMAS_DIR)


class TestLocalReferences:
    def test_same_target_same_object(self, resolver):
        schema = {
            "definitions": {"Name": {"type": "string"}},
            "properties": {"first": {"$ref": "#/definitions/Name"}, "last": {"$ref": "#/definitions/Name"}},
        }
        result = resolver.dereference(schema)
        assert result["properties"]["first"] is result["properties"]["last"]
        assert result["properties"]["first"] is result["definitions"]["Name"]

    def test_root_reference_makes_a_cycle(self, resolver):
        schema = {"title": "Node", "properties": {"next": {"$ref": "#"}}}
        result = resolver.dereference(schema)
        assert result["properties"]["next"] is result

    def test_input_is_not_modified(self, resolver):
        schema = {"definitions": {"A": {"type": "string"}}, "properties": {"a": {"$ref": "#/definitions/A"}}}
        resolver.dereference(schema)
        assert schema["properties"]["a"] == {"$ref": "#/definitions/A"}

    def test_siblings_override_target(self, resolver):
        schema = {
            "definitions": {"A": {"type": "string", "description": "An A"}},
            "properties": {"a": {"$ref": "#/definitions/A", "description": "Overridden", "default": "x"}},
        }
        result = resolver.dereference(schema)
        assert result["properties"]["a"] == {"type": "string", "description": "Overridden", "default": "x"}
        assert result["definitions"]["A"]["description"] == "An A"

    def test_escaped_pointer_tokens(self, resolver):
        schema = {
            "definitions": {"a/b": {"type": "string"}, "c~d": {"type": "number"}},
            "properties": {"x": {"$ref": "#/definitions/a~1b"}, "y": {"$ref": "#/definitions/c~0d"}},
        }
        result = resolver.dereference(schema)
        assert result["properties"]["x"] == {"type": "string"}
        assert result["properties"]["y"] == {"type": "number"}

    def test_list_index_pointer(self, resolver):
        schema = {"anyOf": [{"type": "string"}], "properties": {"x": {"$ref": "#/anyOf/0"}}}
        result = resolver.dereference(schema)
        assert result["properties"]["x"] is result["anyOf"][0]

    def test_reference_to_reference(self, resolver):
        schema = {
            "definitions": {"A": {"$ref": "#/definitions/B"}, "B": {"type": "boolean"}},
            "properties": {"a": {"$ref": "#/definitions/A"}},
        }
        assert resolver.dereference(schema)["properties"]["a"] == {"type": "boolean"}

    def test_data_keywords_are_not_resolved(self, resolver):
        schema = {"properties": {"a": {"type": "object", "default": {"$ref": "#/nowhere"}}}}
        result = resolver.dereference(schema)
        assert result["properties"]["a"]["default"] == {"$ref": "#/nowhere"}


class TestErrors:
    def test_missing_target(self, resolver):
        schema = {"definitions": {}, "properties": {"a": {"$ref": "#/definitions/Missing"}}}
        with pytest.raises(ResolverError, match="no 'Missing' in target"):
            resolver.dereference(schema)

    def test_circular_chain(self, resolver):
        schema = {
            "definitions": {"A": {"$ref": "#/definitions/B"}, "B": {"$ref": "#/definitions/A"}},
            "properties": {"a": {"$ref": "#/definitions/A"}},
        }
        with pytest.raises(ResolverError, match="Circular"):
            resolver.dereference(schema)

    def test_remote_reference(self, resolver):
        schema = {"properties": {"a": {"$ref": "https://example.com/a.json"}}}
        with pytest.raises(ResolverError, match="Unsupported remote reference"):
            resolver.dereference(schema)

    def test_missing_file(self, resolver):
        schema = {"properties": {"a": {"$ref": "missing.json"}}}
        with pytest.raises(ResolverError, match="Cannot read referenced schema"):
            resolver.dereference(schema)

    def test_invalid_json_file(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json")
        schema = {"properties": {"a": {"$ref": "broken.json"}}}
        with pytest.raises(ResolverError, match="Cannot read referenced schema"):
            ReferenceResolver(tmp_path).dereference(schema)

    def test_extending_non_object_target(self, resolver):
        schema = {"definitions": {"L": [1, 2]}, "properties": {"a": {"$ref": "#/definitions/L", "title": "X"}}}
        with pytest.raises(ResolverError, match="Cannot extend"):
            resolver.dereference(schema)


class TestFileReferences:
    def load(self, name):
        with open(SCHEMAS_DIR / name) as f:
            return json.load(f)

    def test_file_and_pointer_into_file(self, resolver):
        result = resolver.dereference(self.load("person.json"))
        home = result["properties"]["home"]
        assert home["title"] == "Address"
        assert home["properties"]["street"] is result["properties"]["street"]
        assert result["properties"]["street"]["description"] == "Street name"

    def test_file_is_read_once(self):
        calls = []

        def reader(path):
            calls.append(path.name)
            with open(path) as f:
                return json.load(f)

        ReferenceResolver(SCHEMAS_DIR, reader=reader).dereference(self.load("person.json"))
        assert calls == ["address.json"]

    def test_nested_file_is_relative_to_referencing_file(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.json").write_text(json.dumps({"$ref": "b.json"}))
        (tmp_path / "sub" / "b.json").write_text(json.dumps({"type": "string"}))
        schema = {"properties": {"a": {"$ref": "sub/a.json"}}}
        result = ReferenceResolver(tmp_path).dereference(schema)
        assert result["properties"]["a"] == {"type": "string"}

    def test_pipeline_with_referenced_files(self):
        code = PipelineGenerator("Person", self.load("person.json"), cwd=SCHEMAS_DIR).generate()
        assert "export interface Person {\n  home: Address;\n  street: Street;\n}" in code
        assert "/** Street name */\nexport type Street = string;" in code
        assert "export interface Address {\n  street: Street;\n  zip?: string | null;\n}" in code
