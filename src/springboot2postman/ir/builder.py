"""Renders an ApiIR into an OpenAPI 3.0 document."""

import copy
import logging

from springboot2postman.ir.models import ApiIR, Endpoint, Parameter, RequestBody, ResponseSpec

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"


class OpenApiBuilder:
    """Builds an OpenAPI document from the IR.

    One operation is emitted per (path, method). If two endpoints share the
    pair, the later one replaces the earlier.
    """

    def build(self, ir: ApiIR) -> dict:
        logger.debug("Building OpenAPI from IR...")
        spec = {
            "openapi": OPENAPI_VERSION,
            "info": copy.deepcopy(ir.info),
            "servers": copy.deepcopy(ir.servers),
            "paths": {},
            "components": {"schemas": copy.deepcopy(ir.schemas)},
        }

        for endpoint in ir.endpoints:
            operations = spec["paths"].setdefault(endpoint.path, {})
            method = endpoint.method.lower()
            if method in operations:
                logger.debug(
                    "Duplicate operation %s %s: %s replaces %s",
                    endpoint.method, endpoint.path, endpoint.id, operations[method]["operationId"],
                )
            operations[method] = self.build_operation(endpoint)

        logger.debug("Built OpenAPI spec with %d endpoints", len(ir.endpoints))
        return spec

    def build_operation(self, endpoint: Endpoint) -> dict:
        operation = {"summary": endpoint.name, "operationId": endpoint.id}
        if endpoint.description:
            operation["description"] = endpoint.description
        if endpoint.tags:
            operation["tags"] = list(endpoint.tags)

        parameters = [
            self.build_parameter(p)
            for p in endpoint.parameters.path + endpoint.parameters.query + endpoint.parameters.header
        ]
        if parameters:
            operation["parameters"] = parameters

        if endpoint.request_body:
            operation["requestBody"] = self.build_request_body(endpoint.request_body)

        operation["responses"] = self.build_responses(endpoint.responses)
        return operation

    def build_parameter(self, param: Parameter) -> dict:
        schema = {"type": param.json_type}
        if param.format:
            schema["format"] = param.format
        if param.default_value is not None:
            schema["default"] = param.default_value

        parameter = {
            "name": param.name,
            "in": param.location,
            "required": param.required,
            "schema": schema,
        }
        if param.description:
            parameter["description"] = param.description
        if param.example is not None:
            parameter["example"] = param.example
        return parameter

    def build_request_body(self, body: RequestBody) -> dict:
        media = {"schema": copy.deepcopy(body.schema_)}
        if body.example is not None:
            media["example"] = copy.deepcopy(body.example)
        return {"required": body.required, "content": {body.content_type: media}}

    def build_responses(self, responses: list[ResponseSpec]) -> dict:
        result = {}
        for response in responses:
            entry = {"description": response.description or "Successful response"}
            media = {}
            if response.schema_:
                media["schema"] = copy.deepcopy(response.schema_)
            if response.example is not None:
                media["example"] = copy.deepcopy(response.example)
            if media:
                entry["content"] = {response.content_type: media}
            result[str(response.status)] = entry

        if not result:
            result["200"] = {"description": "Successful response"}
        return result
