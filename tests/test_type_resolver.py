from springboot2postman.parser import type_resolver
from springboot2postman.parser.type_resolver import (
    base_type,
    entity_name,
    extract_generic_type,
    generate_example,
    is_collection,
    is_primitive,
    needs_schema,
    ref_name,
    resolve,
)


class TestResolve:
    def test_resolve_is_pure(self):
        for java_type in ["Long", "List<User>", "Map<String, Object>", "ResponseEntity<Page>"]:
            first = resolve(java_type)
            first["mutated"] = True
            assert resolve(java_type) == resolve(java_type)
            assert "mutated" not in resolve(java_type)

    def test_scalars(self):
        assert resolve("String") == {"type": "string"}
        assert resolve("int") == {"type": "integer", "format": "int32"}
        assert resolve("Long") == {"type": "integer", "format": "int64"}
        assert resolve("double") == {"type": "number", "format": "double"}
        assert resolve("Boolean") == {"type": "boolean"}

    def test_date_types(self):
        assert resolve("LocalDate") == {"type": "string", "format": "date"}
        assert resolve("LocalDateTime") == {"type": "string", "format": "date-time"}
        assert resolve("UUID") == {"type": "string", "format": "uuid"}

    def test_list_of_long(self):
        assert resolve("List<Long>") == {"type": "array", "items": {"type": "integer", "format": "int64"}}

    def test_set_and_flux_are_arrays(self):
        assert resolve("Set<String>")["type"] == "array"
        assert resolve("Flux<User>") == {"type": "array", "items": {"$ref": "#/components/schemas/User"}}

    def test_array_suffix(self):
        assert resolve("String[]") == {"type": "array", "items": {"type": "string"}}

    def test_map_is_open_object(self):
        assert resolve("Map<String, Object>") == {"type": "object", "additionalProperties": True}

    def test_wrappers_are_unwrapped(self):
        assert resolve("ResponseEntity<User>") == {"$ref": "#/components/schemas/User"}
        assert resolve("Optional<Integer>") == {"type": "integer", "format": "int32"}
        assert resolve("ResponseEntity<List<User>>") == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/User"},
        }

    def test_unknown_type_is_reference_to_stripped_name(self):
        assert resolve("UserDTO") == {"$ref": "#/components/schemas/UserDTO"}
        assert resolve("Page<Order>") == {"$ref": "#/components/schemas/Page"}

    def test_wildcard_is_object(self):
        assert resolve("ResponseEntity<?>") == {"type": "object"}


class TestHelpers:
    def test_base_type(self):
        assert base_type("List<Map<String, User>>") == "List"
        assert base_type("byte[]") == "byte"

    def test_extract_generic_type(self):
        assert extract_generic_type("ResponseEntity<List<User>>") == "List<User>"
        assert extract_generic_type("String") == "Object"

    def test_predicates(self):
        assert is_primitive("int")
        assert not is_primitive("UserDTO")
        assert is_collection("List<User>")
        assert not is_collection("Map<String, User>")

    def test_needs_schema(self):
        assert needs_schema("UserDTO")
        assert needs_schema("List<UserDTO>")
        assert not needs_schema("List<String>")
        assert not needs_schema("Long")
        assert not needs_schema("Void")

    def test_entity_name(self):
        assert entity_name("ResponseEntity<List<User>>") == "User"
        assert entity_name("Optional<Product>") == "Product"
        assert entity_name("OrderDTO") == "OrderDTO"

    def test_ref_name_follows_array_items(self):
        assert ref_name(resolve("List<User>")) == "User"
        assert ref_name(resolve("String")) is None

    def test_generate_example(self):
        assert generate_example("String") == "example"
        assert generate_example("Long") == 1
        assert generate_example("List<User>") == []
        assert generate_example("UserDTO") == {}
        assert type_resolver.SCHEMA_REF_PREFIX == "#/components/schemas/"
