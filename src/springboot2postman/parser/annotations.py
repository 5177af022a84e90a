"""Interpretation of Spring MVC directives.

Turns the raw Annotation records collected by the source parser into
endpoint mappings (verb + path) and parameter bindings.
"""

import re

from springboot2postman.parser.base import Annotation, ParameterInfo

MAPPING_METHODS = {
    "GetMapping": "GET",
    "PostMapping": "POST",
    "PutMapping": "PUT",
    "DeleteMapping": "DELETE",
    "PatchMapping": "PATCH",
    "RequestMapping": "GET",
}

# Tried in order, first match wins.
VALUE_PATTERNS = [
    re.compile(r'value\s*=\s*"([^"]+)"'),
    re.compile(r'"([^"]+)"'),
    re.compile(r'path\s*=\s*"([^"]+)"'),
]

NAME_PATTERNS = [
    re.compile(r'value\s*=\s*"([^"]+)"'),
    re.compile(r'name\s*=\s*"([^"]+)"'),
    re.compile(r'@\w+\(\s*"([^"]+)"\s*\)'),
]

REQUEST_METHOD_RE = re.compile(r"method\s*=\s*RequestMethod\.(\w+)")
REQUIRED_RE = re.compile(r"required\s*=\s*(true|false)")
DEFAULT_VALUE_RE = re.compile(r'defaultValue\s*=\s*"([^"]*)"')


def extract_value(annotation: Annotation) -> str:
    """Return the path-like value of a directive, or '' if there is none."""
    if not annotation.value:
        return ""
    value = annotation.value.strip()
    for pattern in VALUE_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)
    return ""


def extract_base_path(class_annotations: list[Annotation]) -> str:
    for annotation in class_annotations:
        if annotation.name == "RequestMapping":
            return extract_value(annotation)
    return ""


def extract_endpoint_info(method_annotations: list[Annotation]) -> dict | None:
    """Return {method, path, annotation} for the first mapping directive, else None."""
    for annotation in method_annotations:
        if annotation.name in MAPPING_METHODS:
            return {
                "method": http_method(annotation),
                "path": extract_value(annotation),
                "annotation": annotation.name,
            }
    return None


def http_method(annotation: Annotation) -> str:
    method = MAPPING_METHODS[annotation.name]
    if annotation.name == "RequestMapping" and annotation.value:
        match = REQUEST_METHOD_RE.search(annotation.value)
        if match:
            method = match.group(1).upper()
    return method


def extract_parameter_info(annotations: list[Annotation], name: str, type_: str) -> ParameterInfo | None:
    """Classify a parameter by its binding directive; None if it has none."""
    for annotation in annotations:
        if annotation.name == "PathVariable":
            return ParameterInfo(name=_param_name(annotation, name), type=type_, location="path", required=True)
        if annotation.name == "RequestParam":
            return ParameterInfo(
                name=_param_name(annotation, name),
                type=type_,
                location="query",
                required=_required(annotation),
                default_value=_default_value(annotation),
            )
        if annotation.name == "RequestBody":
            return ParameterInfo(name=name, type=type_, location="body", required=_required(annotation))
        if annotation.name == "RequestHeader":
            return ParameterInfo(
                name=_param_name(annotation, name),
                type=type_,
                location="header",
                required=_required(annotation),
                default_value=_default_value(annotation),
            )
    return None


def _param_name(annotation: Annotation, default: str) -> str:
    for pattern in NAME_PATTERNS:
        match = pattern.search(annotation.raw)
        if match:
            return match.group(1)
    return default


def _required(annotation: Annotation) -> bool:
    match = REQUIRED_RE.search(annotation.raw)
    if match:
        return match.group(1) == "true"
    return True


def _default_value(annotation: Annotation) -> str | None:
    match = DEFAULT_VALUE_RE.search(annotation.raw)
    return match.group(1) if match else None
