"""
Functional tests: generating DTO files for a directory of specs, through
the orchestrator and through the command line.
"""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from openapi_to_dto.errors import SpecLoadError
from openapi_to_dto.openapi_to_dto import openapi_to_dto
from openapi_to_dto.pipeline import GeneratorConfig, GeneratorOrchestrator

SPECS = Path(__file__).parent / "test_data" / "specs"


class TestGeneratorOrchestrator:
    def test_generates_resource_and_shared_files(self, tmp_path):
        written = GeneratorOrchestrator(SPECS, tmp_path).generate()

        assert sorted(p.relative_to(tmp_path).as_posix() for p in written) == [
            "orders/orders.controller.base.ts",
            "orders/orders.dto.ts",
            "orders/orders.service.ts",
            "shared/shared.dto.ts",
            "users/users.controller.base.ts",
            "users/users.dto.ts",
            "users/users.service.ts",
        ]

        orders = (tmp_path / "orders" / "orders.dto.ts").read_text(encoding="utf-8")
        assert "import { MoneyDto } from '../shared/shared.dto';" in orders
        assert "export class OrderDto {" in orders
        assert "  customer: CustomerDto;" in orders
        assert "  shipping?: OrderShippingDto;" in orders
        assert "export class ListOrdersResponseDataItemDto {" in orders
        assert "  data?: ListOrdersResponseDataItemDto[];" in orders
        assert "export class MoneyDto" not in orders
        assert orders.index("export class CustomerDto") < orders.index("export class OrderDto")

        users = (tmp_path / "users" / "users.dto.ts").read_text(encoding="utf-8")
        assert "  manager?: any;" in users
        assert "  @MinLength(1)" in users

        shared = (tmp_path / "shared" / "shared.dto.ts").read_text(encoding="utf-8")
        assert shared.count("export class MoneyDto {") == 1
        assert shared.count("export enum CurrencyEnum {") == 1
        assert "../shared/shared.dto" not in shared

    def test_controller_and_service(self, tmp_path):
        GeneratorOrchestrator(SPECS, tmp_path).generate()

        controller = (tmp_path / "orders" / "orders.controller.base.ts").read_text(encoding="utf-8")
        assert (
            "import { Body, Controller, Delete, Get, Headers, HttpCode, Param, Post, Put, Query } from '@nestjs/common';"
            in controller
        )
        assert "import { ApiHeader, ApiOperation, ApiParam, ApiQuery, ApiResponse, ApiTags } from '@nestjs/swagger';" in controller
        assert "import { CustomerDto, ListOrdersResponseDto, OrderDto } from './orders.dto';" in controller
        assert "@ApiTags('orders')\n@Controller()\nexport abstract class OrdersController {" in controller
        assert "  @Get('/orders')\n  @ApiOperation({ summary: 'List orders' })\n" in controller
        assert "  @ApiQuery({ name: 'limit', type: Number, required: false })" in controller
        assert (
            "  @ApiHeader({ name: 'X-Request-Id', description: 'X-Request-Id header parameter', required: true,"
            " schema: { type: 'string', format: 'uuid' } })"
        ) in controller
        assert (
            "  listOrders(@Headers('X-Request-Id') xRequestId: string, @Query('limit') limit?: number)"
            ": Promise<ListOrdersResponseDto> {\n"
            "    return this.listOrdersImpl(xRequestId, limit);\n"
            "  }"
        ) in controller
        assert "  protected abstract listOrdersImpl(xRequestId: string, limit?: number): Promise<ListOrdersResponseDto>;" in controller
        assert "  createOrder(@Body() body: OrderDto): Promise<OrderDto> {" in controller
        assert "  @Delete('/orders/:id')\n  @ApiParam({ name: 'id', type: String })\n" in controller
        assert "  @ApiResponse({ status: 204, description: 'Deleted' })\n" in controller
        assert "  @ApiResponse({ status: 404, description: 'Not found' })\n  @HttpCode(204)\n" in controller
        assert "  deleteOrder(@Param('id') id: string): Promise<void> {" in controller
        assert "  @ApiResponse({ status: 200, description: 'Updated customers', type: [CustomerDto] })" in controller
        assert "HttpCode(201)" not in controller

        service = (tmp_path / "orders" / "orders.service.ts").read_text(encoding="utf-8")
        assert "import { Injectable, NotImplementedException } from '@nestjs/common';" in service
        assert "import { CustomerDto, ListOrdersResponseDto, OrderDto } from './orders.dto';" in service
        assert "@Injectable()\nexport class OrdersService {" in service
        assert "  /** List orders */\n  async listOrders(xRequestId: string, limit?: number): Promise<ListOrdersResponseDto> {" in service
        assert "    throw new NotImplementedException('listOrders');" in service
        assert "  async deleteOrder(id: string): Promise<void> {" in service
        assert "  async updateCustomer(body: CustomerDto): Promise<CustomerDto[]> {" in service

        users = (tmp_path / "users" / "users.controller.base.ts").read_text(encoding="utf-8")
        assert "import { Controller, Get } from '@nestjs/common';" in users
        assert "import { ApiResponse } from '@nestjs/swagger';" in users
        assert "ApiTags" not in users
        assert "  listUsers(): Promise<UserDto[]> {" in users

    def test_controllers_and_services_can_be_disabled(self, tmp_path):
        config = GeneratorConfig(generate_controllers=False, generate_services=False)
        written = GeneratorOrchestrator(SPECS, tmp_path, config).generate()
        assert sorted(p.name for p in written) == ["orders.dto.ts", "shared.dto.ts", "users.dto.ts"]

    def test_spec_without_schemas_gets_only_endpoints(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        spec = {
            "openapi": "3.0.3",
            "paths": {
                "/health": {
                    "get": {"operationId": "health", "responses": {"204": {"description": "Healthy"}}},
                    "trace": {"operationId": "traceHealth", "responses": {"200": {"description": "Echo"}}},
                }
            },
        }
        (specs / "health.json").write_text(json.dumps(spec), encoding="utf-8")

        written = GeneratorOrchestrator(specs, tmp_path / "out").generate()

        assert sorted(p.name for p in written) == ["health.controller.base.ts", "health.service.ts"]
        controller = (tmp_path / "out" / "health" / "health.controller.base.ts").read_text(encoding="utf-8")
        assert "export abstract class HealthController {" in controller
        assert "@HttpCode(204)" in controller
        assert "traceHealth" not in controller
        assert "./health.dto" not in controller

    def test_specs_do_not_share_state(self, tmp_path):
        orchestrator = GeneratorOrchestrator(SPECS, tmp_path)
        first = orchestrator.generate_spec(SPECS / "orders.openapi.yaml", "orders")
        orchestrator.generate_spec(SPECS / "users.json", "users")
        again = orchestrator.generate_spec(SPECS / "orders.openapi.yaml", "orders")
        assert first.resource.entity_names == again.resource.entity_names

    def test_operations_of_a_spec(self, tmp_path):
        generation = GeneratorOrchestrator(SPECS, tmp_path).generate_spec(SPECS / "orders.openapi.yaml", "orders")
        operations = {op.operation_id: op for op in generation.operations}

        assert operations["listOrders"].responses[0].type == "ListOrdersResponseDto"
        assert operations["createOrder"].request_type.expression == "OrderDto"
        assert operations["deleteOrder"].responses[0].type == "void"
        assert operations["updateCustomer"].request_type.expression == "CustomerDto"
        assert operations["updateCustomer"].responses[0].type == "CustomerDto[]"

    def test_no_specs(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            written = GeneratorOrchestrator(tmp_path / "empty", tmp_path / "out").generate()
        assert written == []
        assert not (tmp_path / "out").exists()
        assert "No OpenAPI specs found" in caplog.text

    def test_config_paths(self, tmp_path):
        config = GeneratorConfig(shared_folder="common", shared_file="common.dto", entity_suffix="Model")
        written = GeneratorOrchestrator(SPECS, tmp_path, config).generate()
        assert (tmp_path / "common" / "common.dto.ts") in written
        orders = (tmp_path / "orders" / "orders.dto.ts").read_text(encoding="utf-8")
        assert "import { MoneyModel } from '../common/common.dto';" in orders

    def test_braces_in_descriptions_and_patterns(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        spec = {
            "openapi": "3.0.3",
            "components": {
                "schemas": {
                    "Note": {
                        "properties": {
                            "text": {"type": "string", "description": "opening brace { only"},
                            "code": {"type": "string", "pattern": "^}[a-z]/[0-9]$"},
                        }
                    }
                }
            },
        }
        (specs / "notes.json").write_text(json.dumps(spec), encoding="utf-8")

        GeneratorOrchestrator(specs, tmp_path / "out").generate()

        notes = (tmp_path / "out" / "notes" / "notes.dto.ts").read_text(encoding="utf-8")
        assert "description: 'opening brace { only'" in notes
        assert "@Matches(new RegExp('^}[a-z]/[0-9]$'))" in notes

    def test_load_errors_propagate(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        (specs / "bad.yaml").write_text("paths: [unclosed", encoding="utf-8")
        with pytest.raises(SpecLoadError):
            GeneratorOrchestrator(specs, tmp_path / "out").generate()


class TestGeneratorConfig:
    def test_from_dict_ignores_unknown_keys(self):
        config = GeneratorConfig.from_dict({"entity_suffix": "Model", "strict_cycles": True, "unknown": 1})
        assert config.entity_suffix == "Model"
        assert config.strict_cycles is True
        assert not hasattr(config, "unknown")

    def test_round_trip(self):
        config = GeneratorConfig(shared_marker="x-common", template_dir="/tmp/t")
        assert GeneratorConfig.from_dict(config.to_dict()) == config

    def test_round_trip_of_endpoint_options(self):
        config = GeneratorConfig(generate_controllers=False, generate_services=False, include_error_types=True)
        data = config.to_dict()
        assert data["generate_controllers"] is False
        assert data["include_error_types"] is True
        assert GeneratorConfig.from_dict(data) == config


class TestCli:
    def test_generate(self, tmp_path):
        result = CliRunner().invoke(openapi_to_dto, [str(SPECS), str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Generated 7 file(s)" in result.output
        assert (tmp_path / "orders" / "orders.dto.ts").exists()

    def test_flags_override_config_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"entity_suffix": "Model", "shared_folder": "common"}), encoding="utf-8")
        out = tmp_path / "out"
        result = CliRunner().invoke(openapi_to_dto, ["--config", str(config_path), "--entity-suffix", "Data", str(SPECS), str(out)])
        assert result.exit_code == 0, result.output
        orders = (out / "orders" / "orders.dto.ts").read_text(encoding="utf-8")
        assert "export class OrderData {" in orders
        assert (out / "common" / "shared.dto.ts").exists()

    def test_no_controllers_and_no_services(self, tmp_path):
        result = CliRunner().invoke(openapi_to_dto, ["--no-controllers", "--no-services", str(SPECS), str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Generated 3 file(s)" in result.output
        assert not (tmp_path / "orders" / "orders.controller.base.ts").exists()
        assert not (tmp_path / "orders" / "orders.service.ts").exists()

    def test_include_error_types(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        spec = {
            "openapi": "3.0.3",
            "paths": {
                "/items/{id}": {
                    "get": {
                        "operationId": "getItem",
                        "parameters": [{"name": "id", "in": "path", "schema": {"type": "string"}}],
                        "responses": {
                            "200": {
                                "description": "Item",
                                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Item"}}},
                            },
                            "404": {
                                "description": "Missing",
                                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Problem"}}},
                            },
                        },
                    }
                }
            },
            "components": {
                "schemas": {
                    "Item": {"properties": {"id": {"type": "string"}}},
                    "Problem": {"properties": {"title": {"type": "string"}}},
                }
            },
        }
        (specs / "items.json").write_text(json.dumps(spec), encoding="utf-8")

        plain = CliRunner().invoke(openapi_to_dto, [str(specs), str(tmp_path / "plain")])
        assert plain.exit_code == 0, plain.output
        controller = (tmp_path / "plain" / "items" / "items.controller.base.ts").read_text(encoding="utf-8")
        assert "  getItem(@Param('id') id: string): Promise<ItemDto> {" in controller
        assert "  @ApiResponse({ status: 404, description: 'Missing', type: ProblemDto })" in controller
        assert "import { ItemDto, ProblemDto } from './items.dto';" in controller

        errors = CliRunner().invoke(openapi_to_dto, ["--include-error-types", str(specs), str(tmp_path / "errors")])
        assert errors.exit_code == 0, errors.output
        controller = (tmp_path / "errors" / "items" / "items.controller.base.ts").read_text(encoding="utf-8")
        assert "  getItem(@Param('id') id: string): Promise<ItemDto | ProblemDto> {" in controller
        service = (tmp_path / "errors" / "items" / "items.service.ts").read_text(encoding="utf-8")
        assert "  async getItem(id: string): Promise<ItemDto> {" in service
        assert "import { ItemDto } from './items.dto';" in service

    def test_template_dir(self, tmp_path):
        templates = Path(__file__).parent / "test_data" / "templates"
        result = CliRunner().invoke(openapi_to_dto, ["--template-dir", str(templates), str(SPECS), str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "export interface OrderDto {" in (tmp_path / "orders" / "orders.dto.ts").read_text(encoding="utf-8")

    def test_strict_cycles(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        spec = {
            "openapi": "3.0.3",
            "components": {
                "schemas": {
                    "A": {"properties": {"b": {"$ref": "#/components/schemas/B"}}},
                    "B": {"properties": {"a": {"$ref": "#/components/schemas/A"}}},
                }
            },
        }
        (specs / "cyclic.json").write_text(json.dumps(spec), encoding="utf-8")

        lenient = CliRunner().invoke(openapi_to_dto, [str(specs), str(tmp_path / "lenient")])
        assert lenient.exit_code == 0, lenient.output

        strict = CliRunner().invoke(openapi_to_dto, ["--strict-cycles", str(specs), str(tmp_path / "strict")])
        assert strict.exit_code == 1
        assert "Cyclic entity dependencies" in strict.output

    def test_load_error_is_reported(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        (specs / "bad.json").write_text("{", encoding="utf-8")
        result = CliRunner().invoke(openapi_to_dto, [str(specs), str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Cannot parse" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
