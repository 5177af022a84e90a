from pathlib import Path

import pytest

from springboot2postman.errors import NoControllersFound, ProjectNotFound
from springboot2postman.parser.controller_scanner import ControllerScanner, matches_pattern

FIXTURES = Path(__file__).parent / "fixtures"
SPRING_PROJECT = FIXTURES / "spring-project"


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


REST_CONTROLLER = "@RestController\npublic class {name} {{}}\n"


class TestFindControllers:
    def test_fixture_project(self):
        controllers = ControllerScanner().find_controllers(SPRING_PROJECT)
        assert sorted(Path(c).name for c in controllers) == ["ProductController.java", "UserController.java"]

    def test_missing_project(self, tmp_path):
        with pytest.raises(ProjectNotFound):
            ControllerScanner().find_controllers(tmp_path / "missing")

    def test_project_is_a_file(self, tmp_path):
        f = _write(tmp_path, "pom.xml", "<project/>")
        with pytest.raises(ProjectNotFound):
            ControllerScanner().find_controllers(f)

    def test_no_java_files(self, tmp_path):
        with pytest.raises(NoControllersFound) as exc_info:
            ControllerScanner().find_controllers(tmp_path)
        assert exc_info.value.code == "NO_CONTROLLERS_FOUND"

    def test_falls_back_to_any_java_file(self, tmp_path):
        _write(tmp_path, "src/main/java/com/acme/Endpoints.java", REST_CONTROLLER.format(name="Endpoints"))
        controllers = ControllerScanner().find_controllers(tmp_path)
        assert [Path(c).name for c in controllers] == ["Endpoints.java"]

    def test_unannotated_files_are_dropped(self, tmp_path):
        _write(tmp_path, "src/main/java/a/PlainController.java", "public class PlainController {}\n")
        with pytest.raises(NoControllersFound):
            ControllerScanner().find_controllers(tmp_path)

    def test_exclude_wins_over_include(self, tmp_path):
        _write(tmp_path, "src/main/java/com/acme/admin/AdminController.java", REST_CONTROLLER.format(name="A"))
        _write(tmp_path, "src/main/java/com/acme/shop/ShopController.java", REST_CONTROLLER.format(name="S"))

        controllers = ControllerScanner().find_controllers(
            tmp_path, include=["**/acme/**"], exclude=["**/admin/**"]
        )
        assert [Path(c).name for c in controllers] == ["ShopController.java"]

    def test_everything_filtered_out(self, tmp_path):
        _write(tmp_path, "src/main/java/a/UserController.java", REST_CONTROLLER.format(name="U"))
        with pytest.raises(NoControllersFound):
            ControllerScanner().find_controllers(tmp_path, exclude=["*Controller.java"])


class TestFilters:
    def test_include_only(self):
        files = ["/p/src/main/java/a/UserController.java", "/p/src/main/java/b/OrderController.java"]
        assert ControllerScanner().apply_filters(files, ["**/a/*"], None) == files[:1]

    def test_no_filters(self):
        files = ["/p/X.java"]
        assert ControllerScanner().apply_filters(files, [], []) == files

    def test_matches_pattern(self):
        assert matches_pattern("/p/src/main/java/com/acme/UserController.java", "**/acme/*")
        assert not matches_pattern("/p/src/main/java/com/acme/sub/UserController.java", "acme/*.java")
        assert matches_pattern("C:\\p\\acme\\UserController.java", "acme/*Controller.java")
        assert matches_pattern("/p/api.v1/Thing.java", "api.v1")
        assert not matches_pattern("/p/apixv1/Thing.java", "api.v1")


class TestIsController:
    def test_rest_controller(self, tmp_path):
        f = _write(tmp_path, "A.java", "@RestController\nclass A {}")
        assert ControllerScanner().is_controller(str(f))

    def test_controller_needs_response_body_or_mapping(self, tmp_path):
        plain = _write(tmp_path, "B.java", "@Controller\nclass B {}")
        mapped = _write(tmp_path, "C.java", '@Controller\n@RequestMapping("/c")\nclass C {}')
        assert not ControllerScanner().is_controller(str(plain))
        assert ControllerScanner().is_controller(str(mapped))

    def test_unreadable_file(self, tmp_path):
        f = tmp_path / "Bad.java"
        f.write_bytes(b"\xff\xfe\x00@RestController")
        assert not ControllerScanner().is_controller(str(f))

    def test_controller_info(self, tmp_path):
        f = _write(tmp_path, "D.java", "@RestController\npublic class DController {\n}")
        info = ControllerScanner().controller_info(str(f))
        assert info == {"filepath": str(f), "class_name": "DController", "line_count": 3}
