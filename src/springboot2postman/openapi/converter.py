"""Converts an OpenAPI 3.x or Swagger 2.0 document into a Postman v2.1 collection.

Requests are grouped into folders (by tag or by first path segment), path
parameters become Postman ":name" segments, and every documented response is
turned into a saved example.
"""

import copy
import json
import logging
import re
import uuid
from http import HTTPStatus

from springboot2postman.errors import ConversionFailed

logger = logging.getLogger(__name__)

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")
DEFAULT_BASE_URL = "http://localhost:8080"
MAX_SCHEMA_DEPTH = 5

DEFAULT_OPTIONS = {
    "folder_strategy": "Tags",  # Tags | Paths
    "parameters_resolution": "Example",  # Example | Schema
}

TYPE_PLACEHOLDERS = {
    "string": "<string>",
    "integer": "<integer>",
    "number": "<number>",
    "boolean": "<boolean>",
}


class OpenApiConverter:
    """Document-to-collection conversion."""

    def convert(self, document: dict, options: dict | None = None) -> dict:
        logger.debug("Converting OpenAPI to Postman Collection...")
        opts = {**DEFAULT_OPTIONS, **(options or {})}
        try:
            collection = _Conversion(document, opts).run()
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ConversionFailed(str(e) or type(e).__name__) from e

        if not collection["item"]:
            raise ConversionFailed("No requests generated from specification")

        logger.debug("Conversion successful: %s", collection["info"]["name"])
        return collection

    def apply_base_url(self, collection: dict, base_url: str | None) -> dict:
        if not base_url:
            return collection

        logger.debug("Applying base URL: %s", base_url)
        variables = collection.setdefault("variable", [])
        for variable in variables:
            if variable.get("key") == "baseUrl":
                variable["value"] = base_url
                break
        else:
            variables.append({"key": "baseUrl", "value": base_url, "type": "string"})
        return collection


class _Conversion:
    """State for converting one document."""

    def __init__(self, document: dict, options: dict):
        self.doc = document
        self.options = options
        self.use_examples = options["parameters_resolution"] == "Example"

    def run(self) -> dict:
        info = self.doc.get("info") or {}
        title = info.get("title") or "API"

        folders: dict[str, dict] = {}
        root_items: list[dict] = []

        for path, path_item in self.doc["paths"].items():
            shared_params = path_item.get("parameters", [])
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if operation is None:
                    continue
                item = self.build_item(path, method.upper(), operation, shared_params)
                folder_name = self.folder_for(path, operation)
                if folder_name is None:
                    root_items.append(item)
                    continue
                if folder_name not in folders:
                    folders[folder_name] = {"name": folder_name, "item": []}
                    description = self.tag_description(folder_name)
                    if description:
                        folders[folder_name]["description"] = description
                folders[folder_name]["item"].append(item)

        collection_info = {
            "_postman_id": str(uuid.uuid5(uuid.NAMESPACE_URL, title)),
            "name": title,
            "schema": POSTMAN_SCHEMA,
        }
        if info.get("description"):
            collection_info["description"] = info["description"]

        return {
            "info": collection_info,
            "item": list(folders.values()) + root_items,
            "variable": [{"key": "baseUrl", "value": self.base_url(), "type": "string"}],
        }

    # -- document lookups ----------------------------------------------------

    def base_url(self) -> str:
        servers = self.doc.get("servers") or []
        if servers and servers[0].get("url"):
            return servers[0]["url"].rstrip("/") or "/"
        if self.doc.get("host"):
            scheme = (self.doc.get("schemes") or ["http"])[0]
            return f"{scheme}://{self.doc['host']}{self.doc.get('basePath', '')}".rstrip("/")
        return DEFAULT_BASE_URL

    def folder_for(self, path: str, operation: dict) -> str | None:
        if self.options["folder_strategy"] == "Paths":
            segments = [s for s in path.split("/") if s and not s.startswith("{")]
            return segments[0] if segments else None
        tags = operation.get("tags") or []
        return tags[0] if tags else None

    def tag_description(self, name: str) -> str:
        for tag in self.doc.get("tags") or []:
            if tag.get("name") == name:
                return tag.get("description", "")
        return ""

    def deref(self, node: dict) -> dict:
        """Follow a local "#/..." JSON pointer."""
        seen = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen or not ref.startswith("#/"):
                return {}
            seen.add(ref)
            target = self.doc
            for part in ref[2:].split("/"):
                target = target.get(part.replace("~1", "/").replace("~0", "~"), {})
            node = target
        return node

    # -- request building ----------------------------------------------------

    def build_item(self, path: str, method: str, operation: dict, shared_params: list) -> dict:
        params = {}
        for param in list(shared_params) + list(operation.get("parameters", [])):
            param = self.deref(param)
            params[(param.get("name"), param.get("in"))] = param

        path_params = [p for p in params.values() if p.get("in") == "path"]
        query_params = [p for p in params.values() if p.get("in") == "query"]
        header_params = [p for p in params.values() if p.get("in") == "header"]

        request = {
            "method": method,
            "header": [
                {"key": p["name"], "value": str(self.param_value(p)), "description": p.get("description", "")}
                for p in header_params
            ],
            "url": self.build_url(path, path_params, query_params),
        }
        if operation.get("description") or operation.get("summary"):
            request["description"] = operation.get("description") or operation.get("summary")

        body = self.build_body(operation, list(params.values()))
        if body:
            request["body"] = body

        name = operation.get("summary") or operation.get("operationId") or f"{method} {path}"
        return {
            "name": name,
            "request": request,
            "response": self.build_responses(operation, request),
        }

    def build_url(self, path: str, path_params: list[dict], query_params: list[dict]) -> dict:
        segments = [re.sub(r"\{([^}]+)\}", r":\1", s) for s in path.split("/") if s]
        url = {
            "raw": "{{baseUrl}}/" + "/".join(segments),
            "host": ["{{baseUrl}}"],
            "path": segments,
        }
        if query_params:
            url["query"] = [
                {
                    "key": p["name"],
                    "value": str(self.param_value(p)),
                    "description": p.get("description", ""),
                    **({} if p.get("required") else {"disabled": True}),
                }
                for p in query_params
            ]
            enabled = [f"{q['key']}={q['value']}" for q in url["query"] if not q.get("disabled")]
            if enabled:
                url["raw"] += "?" + "&".join(enabled)
        if path_params:
            url["variable"] = [
                {"key": p["name"], "value": str(self.param_value(p)), "description": p.get("description", "")}
                for p in path_params
            ]
        return url

    def param_value(self, param: dict):
        schema = self.deref(param.get("schema") or {k: v for k, v in param.items() if k in ("type", "format")})
        if self.use_examples:
            for source in (param, schema):
                if "example" in source:
                    return source["example"]
            if "default" in schema:
                return schema["default"]
            if schema.get("enum"):
                return schema["enum"][0]
        return placeholder(schema)

    def build_body(self, operation: dict, params: list[dict]) -> dict | None:
        request_body = operation.get("requestBody")
        if request_body:
            content = self.deref(request_body).get("content", {})
            if "application/json" in content or not content:
                media = content.get("application/json", {})
                return raw_json_body(self.media_example(media))
            for media_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
                if media_type in content:
                    mode = "formdata" if media_type == "multipart/form-data" else "urlencoded"
                    schema = self.deref(content[media_type].get("schema", {}))
                    fields = [
                        {"key": name, "value": str(self.example_for(prop)), "type": "text"}
                        for name, prop in schema.get("properties", {}).items()
                    ]
                    return {"mode": mode, mode: fields}
            media = next(iter(content.values()))
            return raw_json_body(self.media_example(media))

        # Swagger 2.0 style
        body_params = [p for p in params if p.get("in") == "body"]
        if body_params:
            return raw_json_body(self.example_for(body_params[0].get("schema", {})))
        form_params = [p for p in params if p.get("in") == "formData"]
        if form_params:
            return {
                "mode": "formdata",
                "formdata": [
                    {"key": p["name"], "value": str(self.param_value(p)), "type": "text"} for p in form_params
                ],
            }
        return None

    def build_responses(self, operation: dict, request: dict) -> list[dict]:
        responses = []
        for status, response in (operation.get("responses") or {}).items():
            if not str(status).isdigit():
                continue
            code = int(status)
            response = self.deref(response)
            saved = {
                "name": f"{code} {status_phrase(code)}",
                "originalRequest": copy.deepcopy(request),
                "status": status_phrase(code),
                "code": code,
                "_postman_previewlanguage": "json",
                "header": [{"key": "Content-Type", "value": "application/json"}],
            }
            body = None
            content = response.get("content")
            if content:
                body = self.media_example(next(iter(content.values())))
            elif "schema" in response:
                body = self.example_for(response["schema"])
            if body is not None:
                saved["body"] = json.dumps(body, indent=2)
            responses.append(saved)
        return responses

    # -- example synthesis ---------------------------------------------------

    def media_example(self, media: dict):
        if self.use_examples and "example" in media:
            return media["example"]
        if self.use_examples and media.get("examples"):
            first = self.deref(next(iter(media["examples"].values())))
            if "value" in first:
                return first["value"]
        if "schema" in media:
            return self.example_for(media["schema"])
        return None

    def example_for(self, schema: dict, depth: int = 0):
        schema = self.deref(schema)
        if depth > MAX_SCHEMA_DEPTH:
            return {}
        if self.use_examples and "example" in schema:
            return schema["example"]
        if "allOf" in schema:
            merged = {}
            for sub in schema["allOf"]:
                value = self.example_for(sub, depth + 1)
                if isinstance(value, dict):
                    merged.update(value)
            return merged

        schema_type = schema.get("type", "object" if "properties" in schema else None)
        if schema_type == "array":
            return [self.example_for(schema.get("items", {}), depth + 1)]
        if schema_type == "object":
            return {name: self.example_for(prop, depth + 1) for name, prop in schema.get("properties", {}).items()}
        if schema.get("enum"):
            return schema["enum"][0]
        if self.use_examples and "default" in schema:
            return schema["default"]
        return placeholder(schema)


def placeholder(schema: dict) -> str:
    schema_type = schema.get("type", "string")
    if schema.get("format"):
        return f"<{schema['format']}>"
    return TYPE_PLACEHOLDERS.get(schema_type, "<string>")


def raw_json_body(example) -> dict:
    return {
        "mode": "raw",
        "raw": json.dumps(example if example is not None else {}, indent=2),
        "options": {"raw": {"language": "json"}},
    }


def status_phrase(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Response"
