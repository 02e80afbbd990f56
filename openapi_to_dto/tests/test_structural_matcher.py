"""
Tests for structural matching of anonymous object schemas.
"""

import pytest

from openapi_to_dto.pipeline.analyzer import StructuralMatcher, schemas_match
from openapi_to_dto.pipeline.schema_ast import SchemaParser


def obj(**properties):
    return SchemaParser().parse({"type": "object", "properties": {k: {"type": v} for k, v in properties.items()}})


class TestStructuralMatcher:
    def test_property_order_is_irrelevant(self):
        assert schemas_match(obj(id="string", name="string"), obj(name="string", id="string"))

    def test_property_types_are_not_compared(self):
        assert schemas_match(obj(id="string"), obj(id="number"))

    def test_different_name_sets_do_not_match(self):
        assert not schemas_match(obj(id="string"), obj(id="string", name="string"))

    def test_schemas_without_properties_never_match(self):
        parser = SchemaParser()
        assert not schemas_match(parser.parse({"type": "object"}), parser.parse({"type": "object"}))

    def test_first_registered_wins(self):
        matcher = StructuralMatcher()
        matcher.register("FirstDto", obj(id="string", name="string"))
        matcher.register("SecondDto", obj(name="string", id="string"))
        assert matcher.match(obj(id="string", name="string")) == "FirstDto"

    def test_reregistering_keeps_original_schema(self):
        matcher = StructuralMatcher()
        first = obj(a="string")
        matcher.register("ADto", first)
        matcher.register("ADto", obj(b="string"))
        assert matcher.known["ADto"] is first

    def test_no_match(self):
        matcher = StructuralMatcher()
        matcher.register("ADto", obj(a="string"))
        assert matcher.match(obj(b="string")) is None

    def test_explicit_candidates(self):
        matcher = StructuralMatcher()
        matcher.register("ADto", obj(a="string"))
        assert matcher.match(obj(a="string"), known=[("OtherDto", obj(a="number"))]) == "OtherDto"


if __name__ == "__main__":
    pytest.main([__file__])
