"""
Tests for spec discovery, loading and bundling.
"""

from pathlib import Path

import pytest

from openapi_to_dto.errors import SpecLoadError
from openapi_to_dto.pipeline import bundle, extract_resource_name, find_specs, load_document
from openapi_to_dto.pipeline.spec_loader import resolve_pointer

SPECS = Path(__file__).parent / "test_data" / "specs"


class TestDiscovery:
    def test_find_specs(self):
        assert [p.name for p in find_specs(SPECS)] == ["orders.openapi.yaml", "users.json"]

    def test_missing_directory(self, tmp_path):
        assert find_specs(tmp_path / "nope") == []

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("specs/orders.openapi.yaml", "orders"),
            ("users.json", "users"),
            ("billing.yml", "billing"),
            ("a.b.yaml", "a.b"),
        ],
    )
    def test_extract_resource_name(self, path, expected):
        assert extract_resource_name(path) == expected


class TestLoadDocument:
    def test_yaml_and_json(self):
        assert load_document(SPECS / "orders.openapi.yaml")["info"]["title"] == "Orders"
        assert load_document(SPECS / "users.json")["info"]["title"] == "Users"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecLoadError, match="Cannot read"):
            load_document(tmp_path / "missing.yaml")

    def test_malformed_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SpecLoadError, match="Cannot parse"):
            load_document(path)

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(SpecLoadError, match="does not contain a mapping"):
            load_document(path)


class TestBundle:
    def test_external_refs_are_inlined(self):
        spec = bundle(SPECS / "orders.openapi.yaml")
        customer = spec["components"]["schemas"]["Customer"]
        assert "$ref" not in customer
        assert set(customer["properties"]) == {"id", "email"}

        request = spec["paths"]["/customers"]["put"]["requestBody"]["content"]["application/json"]["schema"]
        assert request["properties"]["email"]["format"] == "email"

    def test_internal_refs_are_preserved(self):
        spec = bundle(SPECS / "orders.openapi.yaml")
        order = spec["components"]["schemas"]["Order"]
        assert order["properties"]["customer"] == {"$ref": "#/components/schemas/Customer"}

    def test_unresolvable_external_ref(self, tmp_path):
        path = tmp_path / "api.yaml"
        path.write_text("components:\n  schemas:\n    A:\n      $ref: './missing.yaml'\n", encoding="utf-8")
        with pytest.raises(SpecLoadError):
            bundle(path)

    def test_fragment_and_nested_external_refs(self, tmp_path):
        (tmp_path / "common.yaml").write_text(
            "Money:\n  type: object\n  properties:\n    currency:\n      $ref: '#/Currency'\nCurrency:\n  type: string\n  enum: [EUR]\n",
            encoding="utf-8",
        )
        path = tmp_path / "api.yaml"
        path.write_text("components:\n  schemas:\n    Money:\n      $ref: './common.yaml#/Money'\n", encoding="utf-8")
        money = bundle(path)["components"]["schemas"]["Money"]
        assert money["properties"]["currency"] == {"type": "string", "enum": ["EUR"]}

    def test_cyclic_external_refs_terminate(self, tmp_path):
        (tmp_path / "node.yaml").write_text("type: object\nproperties:\n  next:\n    $ref: './node.yaml'\n", encoding="utf-8")
        path = tmp_path / "api.yaml"
        path.write_text("components:\n  schemas:\n    Node:\n      $ref: './node.yaml'\n", encoding="utf-8")
        node = bundle(path)["components"]["schemas"]["Node"]
        assert node["properties"]["next"] == {"$ref": "./node.yaml"}


class TestResolvePointer:
    def test_resolve_pointer(self):
        document = {"a": {"b/c": [1, {"d": 2}]}}
        assert resolve_pointer(document, "#/a/b~1c/1/d") == 2
        assert resolve_pointer(document, "#/a/missing") is None
        assert resolve_pointer(document, "#") == document


if __name__ == "__main__":
    pytest.main([__file__])
