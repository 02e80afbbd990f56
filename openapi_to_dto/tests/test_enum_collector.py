"""
Tests for enum collection and deduplication.
"""

import pytest

from openapi_to_dto.pipeline.analyzer import EnumCollector, NamingContext, build_enum
from openapi_to_dto.pipeline.schema_ast import SchemaParser


def collect(raw: dict):
    collector = EnumCollector(NamingContext())
    found = collector.collect(SchemaParser().parse(raw))
    return collector, found


class TestEnumCollector:
    def test_keys_are_upper_snake_case(self):
        enum = build_enum("StateEnum", ["open", "in-progress", "inReview"])
        assert enum.keys == ["OPEN", "IN_PROGRESS", "IN_REVIEW"]
        assert [m.value for m in enum.members] == ["open", "in-progress", "inReview"]

    def test_colliding_keys_keep_every_value(self):
        enum = build_enum("XEnum", ["in-progress", "in_progress", "inProgress"])
        assert enum.keys == ["IN_PROGRESS", "IN_PROGRESS_2", "IN_PROGRESS_3"]
        assert [m.value for m in enum.members] == ["in-progress", "in_progress", "inProgress"]

    def test_numbered_key_does_not_clash_with_a_literal(self):
        enum = build_enum("XEnum", ["a-b", "a_b_2", "a_b"])
        assert enum.keys == ["A_B", "A_B_2", "A_B_3"]

    def test_repeated_literal_is_listed_once(self):
        enum = build_enum("XEnum", ["open", "open"])
        assert enum.keys == ["OPEN"]

    def test_same_property_name_collapses_to_one_enum(self):
        collector, _ = collect(
            {
                "type": "object",
                "properties": {
                    "status": {"type": "string", "enum": ["open", "closed"]},
                    "invoice": {
                        "type": "object",
                        "properties": {"status": {"type": "string", "enum": ["open", "closed"]}},
                    },
                },
            }
        )
        assert [e.name for e in collector.enums] == ["StatusEnum"]
        assert collector.enums[0].keys == ["OPEN", "CLOSED"]

    def test_first_definition_wins_across_calls(self):
        collector = EnumCollector(NamingContext())
        parser = SchemaParser()
        collector.collect(parser.parse({"properties": {"status": {"type": "string", "enum": ["open"]}}}))
        collector.collect(parser.parse({"properties": {"status": {"type": "string", "enum": ["done"]}}}))
        assert len(collector.enums) == 1
        assert collector.enums[0].keys == ["OPEN"]

    def test_array_items_and_nested_objects(self):
        collector, found = collect(
            {
                "properties": {
                    "tags": {"type": "array", "items": {"type": "string", "enum": ["a", "b"]}},
                    "lines": {
                        "type": "array",
                        "items": {"type": "object", "properties": {"kind": {"type": "string", "enum": ["x"]}}},
                    },
                }
            }
        )
        assert [e.name for e in found] == ["TagsEnum", "KindEnum"]

    def test_refs_are_not_followed(self):
        _, found = collect({"properties": {"status": {"$ref": "#/components/schemas/Status"}}})
        assert found == []

    def test_shared_subschema_instance_visited_once(self):
        raw = {"type": "object", "properties": {"mode": {"type": "string", "enum": ["on", "off"]}}}
        raw["properties"]["child"] = raw
        _, found = collect(raw)
        assert [e.name for e in found] == ["ModeEnum"]

    def test_collect_named_component(self):
        collector = EnumCollector(NamingContext())
        descriptor = collector.collect_named("order_status", SchemaParser().parse({"type": "string", "enum": ["new"]}))
        assert descriptor.name == "OrderStatusEnum"
        assert collector.collect_named("Plain", SchemaParser().parse({"type": "string"})) is None


if __name__ == "__main__":
    pytest.main([__file__])
