"""Maps Java type strings to JSON-schema fragments.

resolve() is a pure function of its input: scalar and date types come from a
fixed table, containers are unwrapped recursively, and anything unrecognized
becomes a reference to a named component schema so DTOs can be declared later.
"""

import re

SCHEMA_REF_PREFIX = "#/components/schemas/"

TYPE_MAP: dict[str, dict] = {
    "String": {"type": "string"},
    "char": {"type": "string"},
    "Character": {"type": "string"},
    "int": {"type": "integer", "format": "int32"},
    "Integer": {"type": "integer", "format": "int32"},
    "short": {"type": "integer", "format": "int32"},
    "Short": {"type": "integer", "format": "int32"},
    "long": {"type": "integer", "format": "int64"},
    "Long": {"type": "integer", "format": "int64"},
    "byte": {"type": "integer"},
    "Byte": {"type": "integer"},
    "float": {"type": "number", "format": "float"},
    "Float": {"type": "number", "format": "float"},
    "double": {"type": "number", "format": "double"},
    "Double": {"type": "number", "format": "double"},
    "BigDecimal": {"type": "number"},
    "BigInteger": {"type": "integer"},
    "boolean": {"type": "boolean"},
    "Boolean": {"type": "boolean"},
    "Date": {"type": "string", "format": "date-time"},
    "LocalDate": {"type": "string", "format": "date"},
    "LocalTime": {"type": "string", "format": "time"},
    "LocalDateTime": {"type": "string", "format": "date-time"},
    "ZonedDateTime": {"type": "string", "format": "date-time"},
    "OffsetDateTime": {"type": "string", "format": "date-time"},
    "Instant": {"type": "string", "format": "date-time"},
    "Timestamp": {"type": "string", "format": "date-time"},
    "UUID": {"type": "string", "format": "uuid"},
    "URI": {"type": "string", "format": "uri"},
    "URL": {"type": "string", "format": "uri"},
    "Object": {"type": "object"},
    "Map": {"type": "object"},
    "HashMap": {"type": "object"},
    "LinkedHashMap": {"type": "object"},
}

PRIMITIVES = {
    "String", "char", "Character",
    "int", "Integer", "long", "Long", "short", "Short", "byte", "Byte",
    "float", "Float", "double", "Double",
    "boolean", "Boolean",
}

COLLECTIONS = ("List", "ArrayList", "LinkedList", "Set", "HashSet", "TreeSet", "Collection", "Iterable")
MAPS = ("Map", "HashMap", "LinkedHashMap", "TreeMap")
UNWRAPPED = ("ResponseEntity", "Optional", "Mono", "CompletableFuture")
STREAMS = ("Flux",)

# Bases that never need a component schema.
OPAQUE = {"Object", "Map", "HashMap", "Date", "LocalDate", "UUID", "Void", "void"}

EXAMPLES = {
    "String": "example",
    "int": 1,
    "Integer": 1,
    "long": 1,
    "Long": 1,
    "float": 1.0,
    "Float": 1.0,
    "double": 1.0,
    "Double": 1.0,
    "boolean": True,
    "Boolean": True,
    "Date": "2024-01-01T00:00:00Z",
    "LocalDate": "2024-01-01",
    "LocalDateTime": "2024-01-01T00:00:00",
    "UUID": "123e4567-e89b-12d3-a456-426614174000",
}


def base_type(java_type: str) -> str:
    """Strip generics and array brackets: 'List<User>' -> 'List'."""
    return re.sub(r"<.*>", "", java_type).replace("[]", "").strip()


def extract_generic_type(java_type: str) -> str:
    """Return the text between the outermost angle brackets, or 'Object'."""
    match = re.search(r"<(.+)>", java_type)
    return match.group(1).strip() if match else "Object"


def _has_base(java_type: str, names: tuple[str, ...]) -> bool:
    return base_type(java_type) in names


def resolve(java_type: str) -> dict:
    """Resolve a Java type string to a schema descriptor."""
    java_type = java_type.strip()
    if java_type.endswith("[]"):
        return {"type": "array", "items": resolve(java_type[:-2])}

    base = base_type(java_type)
    if base in ("?", ""):
        return {"type": "object"}
    if base in TYPE_MAP and "<" not in java_type:
        return dict(TYPE_MAP[base])

    if _has_base(java_type, COLLECTIONS) or _has_base(java_type, STREAMS):
        return {"type": "array", "items": resolve(extract_generic_type(java_type))}
    if _has_base(java_type, MAPS):
        return {"type": "object", "additionalProperties": True}
    if _has_base(java_type, UNWRAPPED):
        return resolve(extract_generic_type(java_type))

    if base in TYPE_MAP:
        return dict(TYPE_MAP[base])
    return {"$ref": f"{SCHEMA_REF_PREFIX}{base}"}


def is_primitive(java_type: str) -> bool:
    return base_type(java_type) in PRIMITIVES


def is_collection(java_type: str) -> bool:
    return _has_base(java_type, COLLECTIONS)


def needs_schema(java_type: str) -> bool:
    """Whether the type should be declared as a named component schema."""
    if is_primitive(java_type):
        return False
    if base_type(java_type) in OPAQUE:
        return False
    if is_collection(java_type):
        return needs_schema(extract_generic_type(java_type))
    return True


def entity_name(java_type: str) -> str:
    """Peel wrapper and collection generics: 'ResponseEntity<List<User>>' -> 'User'."""
    name = java_type.strip()
    while base_type(name) in COLLECTIONS + UNWRAPPED + STREAMS:
        name = extract_generic_type(name)
    name = base_type(name)
    return name or "Entity"


def ref_name(schema: dict) -> str | None:
    """Name of the component a schema refers to, following array items."""
    if "$ref" in schema:
        return schema["$ref"][len(SCHEMA_REF_PREFIX):]
    if schema.get("type") == "array":
        return ref_name(schema.get("items", {}))
    return None


def generate_example(java_type: str):
    """Fixed placeholder example for a type."""
    base = base_type(java_type)
    if base in EXAMPLES and "<" not in java_type:
        return EXAMPLES[base]
    if is_collection(java_type):
        return []
    return {}
