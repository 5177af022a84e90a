"""Scans model-like Java files and caches their field lists by class name."""

import logging
import re
from pathlib import Path

from springboot2postman.fileutils import glob_files, is_directory, path_exists, read_file
from springboot2postman.parser import type_resolver
from springboot2postman.parser.base import DtoDescriptor, DtoField
from springboot2postman.parser.java_source import split_top_level

logger = logging.getLogger(__name__)

DTO_PATTERNS = [
    "src/main/java/**/*DTO.java",
    "src/main/java/**/*Dto.java",
    "src/main/java/**/*Request.java",
    "src/main/java/**/*Response.java",
    "src/main/java/**/model/*.java",
    "src/main/java/**/entity/*.java",
    "src/main/java/**/domain/*.java",
]

CLASS_RE = re.compile(r"(?:public\s+)?class\s+(\w+)")
RECORD_RE = re.compile(r"record\s+(\w+)\s*\(((?:[^()]|\([^()]*\))*)\)")
FIELD_RE = re.compile(
    r"(?:private|protected|public)\s+(?:final\s+)?"
    r"(\w+(?:<(?:[^<>]|<[^<>]*>)*>)?(?:\[\])?)\s+(\w+)\s*[;=]"
)

INVALID_FIELD_NAMES = {"serialVersionUID", "logger", "log", "LOG"}
INVALID_FIELD_TYPES = {"Logger", "Log"}

DTO_SUFFIX_RE = re.compile(r"(DTO|Dto|Request|Response)$")

# Fallback shapes for DTOs that were never found on disk, matched by substring.
COMMON_FIELDS = [
    ("user", [("id", "Long"), ("name", "String"), ("email", "String"), ("createdAt", "LocalDateTime")]),
    ("product", [("id", "Long"), ("name", "String"), ("description", "String"), ("price", "BigDecimal")]),
    ("order", [("id", "Long"), ("status", "String"), ("total", "BigDecimal"), ("createdAt", "LocalDateTime")]),
]
GENERIC_FIELDS = [("id", "Long"), ("name", "String"), ("createdAt", "LocalDateTime")]


class DtoScanner:
    """Name-indexed cache of DTO field lists.

    The first descriptor inserted under a name wins. Lookups by prefix scan
    the cache in insertion order, which follows file enumeration order.
    """

    def __init__(self):
        self.cache: dict[str, DtoDescriptor] = {}

    def scan_project(self, project_path: str | Path) -> dict[str, DtoDescriptor]:
        logger.debug("Scanning for DTOs in: %s", project_path)
        if not path_exists(project_path) or not is_directory(project_path):
            return self.cache

        files: dict[str, None] = {}
        for pattern in DTO_PATTERNS:
            for f in glob_files(project_path, pattern):
                files[f] = None
        logger.debug("Found %d potential DTO files", len(files))

        for file in files:
            try:
                dto = self.parse_dto_file(file)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Failed to parse %s: %s", file, e)
                continue
            if dto:
                self.add(dto)

        logger.debug("Parsed %d DTO(s)", len(self.cache))
        return self.cache

    def add(self, dto: DtoDescriptor) -> None:
        self.cache.setdefault(dto.name, dto)

    def parse_dto_file(self, filepath: str) -> DtoDescriptor | None:
        return parse_dto_source(read_file(filepath), filepath)

    def get(self, name: str) -> DtoDescriptor | None:
        if name in self.cache:
            return self.cache[name]

        base = DTO_SUFFIX_RE.sub("", name)
        for key, dto in self.cache.items():
            if key.startswith(base):
                return dto
        return None

    def infer_fields(self, type_name: str) -> list[DtoField]:
        """Cached fields for a type, or a templated guess so callers always get a shape."""
        dto = self.get(type_name)
        if dto:
            return dto.fields
        return common_fields_for_type(type_name)

    def generate_schema(self, dto: DtoDescriptor) -> dict:
        properties = {f.name: type_resolver.resolve(f.type) for f in dto.fields}
        return {"type": "object", "properties": properties}


def parse_dto_source(content: str, filepath: str | None = None) -> DtoDescriptor | None:
    """Extract a DTO from Java source: one class (or record) match plus a field sweep."""
    record_match = RECORD_RE.search(content)
    class_match = CLASS_RE.search(content)

    if class_match and (not record_match or class_match.start() < record_match.start()):
        fields = [
            DtoField(name=m.group(2), type=m.group(1))
            for m in FIELD_RE.finditer(content)
            if _is_valid_field(m.group(2), m.group(1))
        ]
        return DtoDescriptor(name=class_match.group(1), fields=fields, filepath=filepath)

    if record_match:
        fields = []
        for component in split_top_level(record_match.group(2)):
            tokens = re.sub(r"@\w+(?:\([^)]*\))?", "", component).split()
            if len(tokens) >= 2 and _is_valid_field(tokens[-1], " ".join(tokens[:-1])):
                fields.append(DtoField(name=tokens[-1], type=" ".join(tokens[:-1])))
        return DtoDescriptor(name=record_match.group(1), fields=fields, filepath=filepath)

    return None


def common_fields_for_type(type_name: str) -> list[DtoField]:
    lower = type_name.lower()
    for keyword, fields in COMMON_FIELDS:
        if keyword in lower:
            return [DtoField(name=n, type=t) for n, t in fields]
    return [DtoField(name=n, type=t) for n, t in GENERIC_FIELDS]


def _is_valid_field(name: str, type_: str) -> bool:
    return name not in INVALID_FIELD_NAMES and type_ not in INVALID_FIELD_TYPES
