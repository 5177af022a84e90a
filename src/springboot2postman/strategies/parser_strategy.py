"""Strategy that extracts endpoints straight from Spring controller sources.

Controllers are parsed on a bounded thread pool. Workers only read files and
build endpoint records, each with a mock generator forked for its file; the DTO
cache is filled beforehand and the IR is only touched on the calling thread,
in controller order.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel

from springboot2postman.config import GenerateOptions
from springboot2postman.errors import ParseError, Springboot2PostmanError
from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.ir.builder import OpenApiBuilder
from springboot2postman.ir.models import (
    ApiIR,
    Endpoint,
    ResponseSpec,
    create_empty_ir,
    create_parameter,
    create_request_body,
)
from springboot2postman.openapi.converter import OpenApiConverter
from springboot2postman.parser import type_resolver
from springboot2postman.parser.annotations import (
    extract_base_path,
    extract_endpoint_info,
    extract_parameter_info,
)
from springboot2postman.parser.base import ClassInfo, DtoDescriptor, SourceFile
from springboot2postman.parser.controller_scanner import ControllerScanner
from springboot2postman.parser.dto_scanner import DtoScanner
from springboot2postman.parser.java_source import JavaSourceParser
from springboot2postman.postman.enhancer import PostmanEnhancer
from springboot2postman.strategies.base import CONVERSION_OPTIONS, BaseStrategy

logger = logging.getLogger(__name__)

IR_TITLE = "Spring Boot API"
IR_VERSION = "1.0.0"

VOID_TYPES = {"void", "Void"}


class ControllerResult(BaseModel):
    """Outcome of extracting one controller file."""

    filename: str
    endpoints: list[Endpoint] = []
    schema_types: list[str] = []
    error: str | None = None


class ParserStrategy(BaseStrategy):
    """Scan, extract, build an OpenAPI document, convert and enhance."""

    def __init__(self, source: str, mock_generator: MockDataGenerator | None = None):
        super().__init__(source)
        self.controller_scanner = ControllerScanner()
        self.source_parser = JavaSourceParser()
        self.dto_scanner = DtoScanner()
        self.mock_generator = mock_generator or MockDataGenerator()
        self.builder = OpenApiBuilder()
        self.converter = OpenApiConverter()
        self.enhancer = PostmanEnhancer(self.mock_generator, self.dto_scanner)

    def validate(self) -> bool:
        try:
            self.controller_scanner.find_controllers(self.source)
            return True
        except Springboot2PostmanError as e:
            logger.debug("No controllers usable in %s: %s", self.source, e)
            return False

    def extract(self, options: GenerateOptions | None = None) -> dict:
        options = options or GenerateOptions()
        logger.debug("Using parser strategy")

        ir = self.build_ir(options)
        document = self.builder.build(ir)
        if options.format == "openapi":
            return document

        collection = self.converter.convert(document, CONVERSION_OPTIONS)
        collection = self.converter.apply_base_url(collection, options.base_url)
        return self.enhancer.enhance(collection, options)

    def build_ir(self, options: GenerateOptions) -> ApiIR:
        """Run discovery and extraction and merge everything into a fresh IR."""
        ir = create_empty_ir(IR_TITLE, IR_VERSION)
        if options.base_url:
            ir.set_server_url(options.base_url)

        self.dto_scanner.scan_project(self.source)
        controllers = self.controller_scanner.find_controllers(self.source, options.include, options.exclude)

        parsed = 0
        for result in self.parse_controllers_parallel(controllers, options.concurrency):
            if result.error is not None:
                logger.warning("Failed to parse %s: %s", result.filename, result.error)
                continue
            parsed += 1
            for endpoint in result.endpoints:
                ir.add_endpoint(endpoint)
            for java_type in result.schema_types:
                self.register_schemas(ir, java_type)
            logger.debug("%s: %d endpoint(s)", result.filename, len(result.endpoints))

        logger.info(
            "Parsed %d/%d controllers, extracted %d endpoints", parsed, len(controllers), len(ir.endpoints)
        )
        return ir

    def parse_controllers_parallel(self, controllers: list[str], concurrency: int) -> Iterator[ControllerResult]:
        """Yield one result per controller, in the order the controllers were given."""
        if not controllers:
            return

        workers = max(1, min(concurrency, len(controllers)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.parse_controller, path): path for path in controllers}
            results: dict[str, ControllerResult] = {}
            for future in as_completed(futures):
                path = futures[future]
                filename = Path(path).name
                try:
                    endpoints, schema_types = future.result()
                except ParseError as e:
                    results[path] = ControllerResult(filename=filename, error=e.details.get("cause") or e.message)
                    continue
                results[path] = ControllerResult(filename=filename, endpoints=endpoints, schema_types=schema_types)

        for path in controllers:
            yield results[path]

    def parse_controller(self, filepath: str) -> tuple[list[Endpoint], list[str]]:
        """Extract endpoints from one file, plus the Java types they reference.

        Raises ParseError for any failure so the caller can skip the file.
        """
        source, class_info = self.source_parser.parse_file(filepath)
        try:
            mock = self.mock_generator.fork(Path(os.path.relpath(filepath, self.source)).as_posix())
            return self.extract_endpoints(source, class_info, mock)
        except Exception as e:
            raise ParseError(filepath, e) from e

    def extract_endpoints(
        self, source: SourceFile, class_info: ClassInfo, mock: MockDataGenerator | None = None
    ) -> tuple[list[Endpoint], list[str]]:
        mock = mock or self.mock_generator
        base_path = extract_base_path(class_info.annotations)
        endpoints: list[Endpoint] = []
        schema_types: list[str] = []

        for method in self.source_parser.extract_methods(source.content):
            info = extract_endpoint_info(method.annotations)
            if info is None:
                continue

            full_path = build_path(base_path, info["path"])
            endpoint = Endpoint(
                id=f"{class_info.class_name}_{method.name}",
                method=info["method"],
                path=full_path,
                name=generate_endpoint_name(method.name),
                tags=[class_info.class_name],
            )

            for raw in self.source_parser.parse_parameters(method.parameters):
                param = extract_parameter_info(raw.annotations, raw.name, raw.type)
                if param is None:
                    continue

                if param.location == "body":
                    body = create_request_body(param.type, param.required)
                    fields = self.dto_scanner.infer_fields(type_resolver.entity_name(param.type))
                    body.example = mock.request_example(param.type, fields, endpoint.method)
                    endpoint.request_body = body
                    schema_types.append(param.type)
                else:
                    parameter = create_parameter(param.name, param.type, param.location, param.required)
                    parameter.example = mock.for_field(param.name, param.type)
                    parameter.default_value = param.default_value
                    getattr(endpoint.parameters, param.location).append(parameter)

            if method.return_type and method.return_type not in VOID_TYPES:
                endpoint.responses = self.generate_responses(endpoint.method, method.return_type, full_path, mock)
                schema_types.append(method.return_type)

            endpoints.append(endpoint)

        return endpoints, schema_types

    def generate_responses(
        self, http_method: str, return_type: str, path: str, mock: MockDataGenerator | None = None
    ) -> list[ResponseSpec]:
        """Synthesize the success and error responses for one handler.

        The first response carries the resolved schema of the return type,
        unless it is a 204 or the return type is Void.
        """
        entity = type_resolver.entity_name(return_type)
        fields = self.dto_scanner.infer_fields(entity)
        schema = None if entity in VOID_TYPES else type_resolver.resolve(return_type)
        mock = mock or self.mock_generator
        not_found = ResponseSpec(
            status=404,
            description="Not found",
            example=mock.error_response(404, f"{entity} not found", path),
        )

        if http_method == "GET":
            if schema is not None and schema.get("type") == "array":
                responses = [ResponseSpec(status=200, example=mock.list_response(entity, fields))]
            else:
                responses = [
                    ResponseSpec(status=200, example=self.success_example(entity, fields, "GET", mock)),
                    not_found,
                ]
        elif http_method == "POST":
            responses = [
                ResponseSpec(
                    status=201,
                    description="Created successfully",
                    example=self.success_example(entity, fields, "POST", mock),
                ),
                ResponseSpec(
                    status=400,
                    description="Bad request",
                    example=mock.error_response(400, "Validation failed", path),
                ),
            ]
        elif http_method in ("PUT", "PATCH"):
            responses = [
                ResponseSpec(
                    status=200,
                    description="Updated successfully",
                    example=self.success_example(entity, fields, http_method, mock),
                ),
                not_found,
            ]
        elif http_method == "DELETE":
            responses = [ResponseSpec(status=204, description="Deleted successfully"), not_found]
        else:
            responses = [ResponseSpec(status=200)]

        if responses[0].status != 204:
            responses[0].schema_ = schema
        return responses

    def success_example(self, entity: str, fields, method: str, mock: MockDataGenerator | None = None):
        mock = mock or self.mock_generator
        if entity in VOID_TYPES:
            return None
        if not type_resolver.needs_schema(entity):
            return mock.for_type(entity)
        return mock.response_example(entity, fields, method)

    def register_schemas(self, ir: ApiIR, java_type: str) -> None:
        """Declare a component schema for java_type and every DTO it reaches."""
        pending = [java_type]
        while pending:
            current = pending.pop()
            if not type_resolver.needs_schema(current):
                continue
            name = type_resolver.ref_name(type_resolver.resolve(current))
            if not name or name in VOID_TYPES or name in ir.schemas:
                continue

            fields = self.dto_scanner.infer_fields(name)
            ir.add_schema(name, self.dto_scanner.generate_schema(DtoDescriptor(name=name, fields=fields)))
            pending.extend(f.type for f in fields)


def build_path(base_path: str | None, endpoint_path: str | None) -> str:
    """Join a class-level base path and a method-level sub-path."""
    base = (base_path or "").strip().rstrip("/")
    path = (endpoint_path or "").strip()
    if path and not path.startswith("/"):
        path = f"/{path}"
    full_path = base + path
    return full_path if full_path.startswith("/") else f"/{full_path}"


def generate_endpoint_name(method_name: str) -> str:
    """'getUserById' -> 'Get User By Id'."""
    words = re.sub(r"([A-Z])", r" \1", method_name).strip()
    return words[:1].upper() + words[1:]
