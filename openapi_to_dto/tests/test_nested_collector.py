"""
Tests for discovery and naming of nested inline entities.
"""

import pytest

from openapi_to_dto.pipeline.analyzer import NamingContext, NestedEntityCollector, StructuralMatcher
from openapi_to_dto.pipeline.schema_ast import SchemaParser


def make_collector():
    naming = NamingContext()
    matcher = StructuralMatcher()
    return NestedEntityCollector(naming, matcher, lambda schema: schema), naming, matcher


ORDER = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "customer": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "address": {"type": "object", "properties": {"city": {"type": "string"}}},
            },
        },
        "lines": {
            "type": "array",
            "items": {"type": "object", "properties": {"sku": {"type": "string"}, "qty": {"type": "integer"}}},
        },
        "grid": {
            "type": "array",
            "items": {"type": "array", "items": {"type": "object", "properties": {"cell": {"type": "string"}}}},
        },
    },
}


class TestNestedEntityCollector:
    def test_recursive_discovery_and_names(self):
        collector, _, _ = make_collector()
        created = collector.collect("OrderDto", SchemaParser().parse(ORDER))
        assert created == [
            "OrderCustomerDto",
            "OrderCustomerAddressDto",
            "OrderLinesItemDto",
            "OrderGridItemItemDto",
        ]
        assert collector.origin("OrderCustomerAddressDto") == "OrderCustomerDto.address"

    def test_structural_matches_are_skipped(self):
        collector, _, matcher = make_collector()
        parser = SchemaParser()
        matcher.register("SkuLineDto", parser.parse({"properties": {"qty": {}, "sku": {}}}))
        created = collector.collect("OrderDto", parser.parse(ORDER))
        assert "OrderLinesItemDto" not in created

    def test_each_name_drained_exactly_once(self):
        collector, _, _ = make_collector()
        schema = SchemaParser().parse(ORDER)
        collector.collect("OrderDto", schema)
        collector.collect("OrderDto", schema)

        drained = [name for name, _ in collector.drain()]
        assert len(drained) == len(set(drained)) == 4
        assert list(collector.drain()) == []

    def test_response_parents_skip_direct_objects(self):
        collector, naming, _ = make_collector()
        response = naming.response_name("listOrders")
        schema = SchemaParser().parse(
            {
                "properties": {
                    "meta": {"type": "object", "properties": {"page": {"type": "integer"}}},
                    "data": {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "string"}}}},
                }
            }
        )
        assert collector.collect(response, schema) == ["ListOrdersResponseDataItemDto"]

    def test_self_containing_schema_terminates(self):
        collector, _, _ = make_collector()
        raw = {"type": "object", "properties": {"value": {"type": "string"}}}
        raw["properties"]["next"] = {"type": "object", "properties": {"inner": raw}}
        created = collector.collect("ListDto", SchemaParser().parse(raw))
        assert created == ["ListNextDto", "ListNextInnerDto"]

    def test_synthesize_registers_for_matching(self):
        collector, _, matcher = make_collector()
        schema = SchemaParser().parse({"properties": {"a": {}}})
        name = collector.synthesize("XDto", "field", schema)
        assert name == "XFieldDto"
        assert matcher.match(SchemaParser().parse({"properties": {"a": {}}})) == name
        assert collector.synthesize("XDto", "field", schema) == name


if __name__ == "__main__":
    pytest.main([__file__])
