"""Post-processing passes that polish a generated Postman collection.

The passes run in a fixed order and never overwrite what is already there,
so enhancing an enhanced collection is a no-op for headers, variables and
saved responses.
"""

import json
import logging
import re
from typing import Any, Callable, Iterator

from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.parser.dto_scanner import DtoScanner

logger = logging.getLogger(__name__)

DEFAULT_VARIABLES = [
    {"key": "baseUrl", "value": "http://localhost:8080", "type": "string"},
    {"key": "token", "value": "<JWT_TOKEN_HERE>", "type": "string"},
]

# Checked in order against the request name when a segment is just ":id".
ENTITY_KEYWORDS = [
    ("user", "userId"),
    ("product", "productId"),
    ("order", "orderId"),
    ("customer", "customerId"),
    ("item", "itemId"),
]

METHOD_ORDER = {"GET": 1, "POST": 2, "PUT": 3, "PATCH": 4, "DELETE": 5}

VERB_PREFIX_RE = re.compile(r"^(GET|POST|PUT|DELETE|PATCH)\s+", re.IGNORECASE)
LIST_NAME_RE = re.compile(r"\b(list|all)\b", re.IGNORECASE)
NAME_STOP_WORDS = {"by", "ID", "the", "Get", "Create", "Update", "Delete", "List"}


class PostmanEnhancer:
    """Adds variables, headers, readable names, ordering and saved responses."""

    def __init__(self, mock_generator: MockDataGenerator, dto_scanner: DtoScanner | None = None):
        self.mock_generator = mock_generator
        self.dto_scanner = dto_scanner or DtoScanner()
        self.collection_variables: dict[str, str] = {}

    def enhance(self, collection: dict, options: Any = None) -> dict:
        logger.debug("Enhancing Postman collection...")
        self.collection_variables = {}
        collection = self.add_default_variables(collection)
        collection = self.add_default_headers(collection)
        collection = self.convert_path_variables(collection)
        collection = self.improve_request_names(collection)
        collection = self.sort_requests(collection)
        collection = self.add_saved_responses(collection)
        return collection

    # -- pass 1: variables ---------------------------------------------------

    def add_default_variables(self, collection: dict) -> dict:
        variables = collection.setdefault("variable", [])
        for default in DEFAULT_VARIABLES:
            _add_variable(variables, default["key"], default["value"])
        self._merge_discovered_variables(collection)
        return collection

    def _merge_discovered_variables(self, collection: dict) -> None:
        variables = collection.setdefault("variable", [])
        for key, value in self.collection_variables.items():
            _add_variable(variables, key, value)

    # -- pass 2: headers -----------------------------------------------------

    def add_default_headers(self, collection: dict) -> dict:
        for item in iter_requests(collection.get("item", [])):
            request = item["request"]
            headers = request.setdefault("header", [])
            _add_header(headers, {"key": "Accept", "value": "application/json", "type": "text"})
            if request.get("body"):
                _add_header(headers, {"key": "Content-Type", "value": "application/json", "type": "text"})
            _add_header(
                headers,
                {"key": "Authorization", "value": "Bearer {{token}}", "type": "text", "disabled": True},
            )
        return collection

    # -- pass 3: path variables ----------------------------------------------

    def convert_path_variables(self, collection: dict) -> dict:
        for item in iter_requests(collection.get("item", [])):
            url = item["request"].get("url")
            if isinstance(url, dict):
                self.process_url_variables(url, item.get("name", ""))
        self._merge_discovered_variables(collection)
        return collection

    def process_url_variables(self, url: dict, request_name: str) -> None:
        path = url.get("path")
        if not path:
            return

        for i, segment in enumerate(path):
            if isinstance(segment, str) and segment.startswith(":"):
                var_name = self.variable_name(segment[1:], request_name)
                path[i] = f"{{{{{var_name}}}}}"
                self.collection_variables.setdefault(var_name, "1")

        for variable in url.get("variable", []):
            var_name = self.variable_name(variable["key"], request_name)
            variable["value"] = f"{{{{{var_name}}}}}"
            self.collection_variables.setdefault(var_name, "1")

        raw = url.get("raw", "")
        query = raw.split("?", 1)[1] if "?" in raw else ""
        host = "/".join(url.get("host", ["{{baseUrl}}"]))
        url["raw"] = f"{host}/" + "/".join(path) + (f"?{query}" if query else "")

    def variable_name(self, param_name: str, request_name: str) -> str:
        """A bare ":id" is named after the entity in the request name; other names are kept."""
        if param_name == "id":
            return guess_variable_name(request_name)
        return param_name

    # -- pass 4: names -------------------------------------------------------

    def improve_request_names(self, collection: dict) -> dict:
        for item in iter_requests(collection.get("item", [])):
            if item.get("name"):
                item["name"] = improve_request_name(item["name"], item["request"].get("method"))
        return collection

    # -- pass 5: ordering ----------------------------------------------------

    def sort_requests(self, collection: dict) -> dict:
        def sort_items(items: list[dict]) -> None:
            items.sort(key=_sort_key)
            for item in items:
                if "item" in item:
                    sort_items(item["item"])

        sort_items(collection.get("item", []))
        return collection

    # -- pass 6: saved responses ---------------------------------------------

    def add_saved_responses(self, collection: dict) -> dict:
        for item in iter_requests(collection.get("item", [])):
            saved = item.setdefault("response", [])
            existing = {r.get("name") for r in saved}
            method = item["request"].get("method", "GET")
            path = path_from_url(item["request"].get("url"))
            entity = guess_entity_name(item.get("name", ""))

            for name, status, make_body in self.response_plan(method, path, entity):
                if name not in existing:
                    saved.append(create_saved_response(name, status, make_body()))
                    existing.add(name)
        return collection

    def response_plan(self, method: str, path: str, entity: str) -> list[tuple[str, int, Callable[[], Any]]]:
        """(name, status, body factory) triples for a request's saved responses."""
        fields = self.dto_scanner.infer_fields(entity)
        mock = self.mock_generator
        success = lambda: mock.response_example(entity, fields, method)
        listing = lambda: mock.list_response(entity, fields, 3)
        invalid = lambda: mock.error_response(400, "Validation failed", path)
        not_found = lambda: mock.error_response(404, f"{entity} not found", path)

        if method == "GET":
            if ":" in path or "{{" in path:
                return [("200 OK", 200, success), ("404 Not Found", 404, not_found)]
            return [("200 OK", 200, listing)]
        if method == "POST":
            return [("201 Created", 201, success), ("400 Bad Request", 400, invalid)]
        if method in ("PUT", "PATCH"):
            return [("200 OK", 200, success), ("400 Bad Request", 400, invalid), ("404 Not Found", 404, not_found)]
        if method == "DELETE":
            return [("204 No Content", 204, lambda: None), ("404 Not Found", 404, not_found)]
        return []


def iter_requests(items: list[dict]) -> Iterator[dict]:
    """Yield every request item in a folder tree, depth first."""
    for item in items:
        if "item" in item:
            yield from iter_requests(item["item"])
        elif "request" in item:
            yield item


def guess_variable_name(request_name: str) -> str:
    lower = request_name.lower()
    for keyword, var_name in ENTITY_KEYWORDS:
        if keyword in lower:
            return var_name
    return "id"


def improve_request_name(name: str, method: str | None) -> str:
    """'getAllUsers' -> 'List Users', 'Get User By Id' -> 'User by ID'."""
    improved = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name)
    improved = VERB_PREFIX_RE.sub("", improved.strip())
    words = [w[:1].upper() + w[1:] for w in improved.split()]

    if method == "GET" and any(w.lower() == "all" for w in words):
        words = [w for w in words if w.lower() != "all"]
        if words[:1] != ["List"]:
            words = ["List"] + words

    improved = " ".join(words)
    return re.sub(r"\bby id\b", "by ID", improved, flags=re.IGNORECASE)


def guess_entity_name(request_name: str) -> str:
    for word in request_name.split():
        if len(word) > 2 and word not in NAME_STOP_WORDS:
            return word
    return "Entity"


def path_from_url(url) -> str:
    if not url:
        return "/"
    if isinstance(url, str):
        return url
    if url.get("path"):
        return "/" + "/".join(url["path"])
    return "/"


def create_saved_response(name: str, status: int, body) -> dict:
    response = {
        "name": name,
        "status": name.split(" ", 1)[1],
        "code": status,
        "_postman_previewlanguage": "json",
        "header": [{"key": "Content-Type", "value": "application/json"}],
    }
    if body is not None:
        response["body"] = json.dumps(body, indent=2)
    return response


def _sort_key(item: dict) -> tuple[int, int, int]:
    if "item" in item:
        return (0, 0, 0)
    rank = METHOD_ORDER.get(item.get("request", {}).get("method", "GET"), 99)
    is_list = bool(LIST_NAME_RE.search(item.get("name", "")))
    return (1, rank, 0 if is_list else 1)


def _add_variable(variables: list[dict], key: str, value: str) -> None:
    if not any(v.get("key") == key for v in variables):
        variables.append({"key": key, "value": value, "type": "string"})


def _add_header(headers: list[dict], header: dict) -> None:
    if not any(h.get("key", "").lower() == header["key"].lower() for h in headers):
        headers.append(header)
