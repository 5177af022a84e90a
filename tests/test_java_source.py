from pathlib import Path

import pytest

from springboot2postman.errors import ParseError
from springboot2postman.parser.java_source import JavaSourceParser, collect_annotations, split_top_level

FIXTURES = Path(__file__).parent / "fixtures"
USER_CONTROLLER = FIXTURES / "spring-project/src/main/java/com/example/api/controller/UserController.java"


@pytest.fixture
def parser():
    return JavaSourceParser()


class TestClassInfo:
    def test_parse_fixture_controller(self, parser):
        source, info = parser.parse_file(USER_CONTROLLER)
        assert source.path == str(USER_CONTROLLER)
        assert info.package_name == "com.example.api.controller"
        assert info.class_name == "UserController"
        assert [a.name for a in info.annotations] == ["RestController", "RequestMapping"]
        assert info.annotations[1].value == '"/api/users"'

    def test_missing_class_is_unknown(self, parser):
        info = parser.extract_class_info("package a.b;\n")
        assert info.class_name == "Unknown"
        assert info.annotations == []

    def test_missing_file_raises_parse_error(self, parser, tmp_path):
        missing = tmp_path / "Nope.java"
        with pytest.raises(ParseError) as exc_info:
            parser.parse_file(missing)
        assert exc_info.value.file == str(missing)
        assert exc_info.value.code == "PARSE_ERROR"


class TestMethods:
    def test_extract_fixture_methods(self, parser):
        source, _ = parser.parse_file(USER_CONTROLLER)
        methods = parser.extract_methods(source.content)
        names = [m.name for m in methods]
        assert names == ["getUser", "getAllUsers", "createUser", "updateUser", "deleteUser"]

        get_all = methods[1]
        assert get_all.return_type == "ResponseEntity<List<User>>"
        assert [a.name for a in get_all.annotations] == ["GetMapping"]
        assert "@RequestParam(required = false) String search" in get_all.parameters

    def test_line_number(self, parser):
        content = "class A {\n\n    @GetMapping\n    public String ping() {\n        return \"ok\";\n    }\n}\n"
        (method,) = parser.extract_methods(content)
        assert method.line_number == 4

    def test_static_and_array_return(self, parser):
        content = "public static final String[] names(int count) { return null; }"
        (method,) = parser.extract_methods(content)
        assert method.return_type == "String[]"
        assert method.name == "names"
        assert method.parameters == "int count"


class TestParameters:
    def test_parse_annotated_parameters(self, parser):
        params = parser.parse_parameters('@PathVariable("id") Long id, @RequestBody final UserDTO body')
        assert [(p.name, p.type) for p in params] == [("id", "Long"), ("body", "UserDTO")]
        assert params[0].annotations[0].name == "PathVariable"
        assert params[0].annotations[0].raw == '@PathVariable("id")'

    def test_generic_parameter_type_is_not_split(self, parser):
        params = parser.parse_parameters("@RequestParam Map<String, String> filters, int page")
        assert [(p.name, p.type) for p in params] == [("filters", "Map<String, String>"), ("page", "int")]

    def test_empty(self, parser):
        assert parser.parse_parameters("") == []
        assert parser.parse_parameters("   ") == []


class TestCollectAnnotations:
    def test_skips_comments_and_blank_lines(self):
        content = (
            "import x;\n"
            "@GetMapping(\"/a\")\n"
            "// a comment\n"
            "\n"
            "/**\n"
            " * docs\n"
            " */\n"
            "@ResponseStatus(HttpStatus.OK)\n"
            "public String a() {}\n"
        )
        offset = content.index("public")
        annotations = collect_annotations(content, offset)
        assert [a.name for a in annotations] == ["GetMapping", "ResponseStatus"]
        assert annotations[0].value == '"/a"'

    def test_stops_at_code_line(self):
        content = "@Deprecated\nint x = 1;\n@PostMapping\npublic void b() {}\n"
        annotations = collect_annotations(content, content.index("public"))
        assert [a.name for a in annotations] == ["PostMapping"]


class TestSplitTopLevel:
    def test_nested_commas_are_kept(self):
        text = '@RequestParam(value = "q", required = false) String q, Map<String, Integer> m, String s'
        assert split_top_level(text) == [
            '@RequestParam(value = "q", required = false) String q',
            "Map<String, Integer> m",
            "String s",
        ]

    def test_commas_inside_quotes(self):
        assert split_top_level('@X("a,b") String a, int b') == ['@X("a,b") String a', "int b"]
