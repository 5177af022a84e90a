import json
import shutil
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from springboot2postman.config import GenerateOptions
from springboot2postman.errors import InvalidDocument, ProjectNotFound
from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.postman.enhancer import iter_requests
from springboot2postman.strategies.detect import detect_strategy, find_openapi_file
from springboot2postman.strategies.openapi_strategy import OpenApiStrategy
from springboot2postman.strategies.parser_strategy import ParserStrategy

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = FIXTURES / "petstore.yaml"
SPRING_PROJECT = FIXTURES / "spring-project"
NOW = datetime(2024, 6, 1, 12, 0, 0)

SINGLE_GET = {
    "openapi": "3.0.0",
    "info": {"title": "Accounts", "version": "1.0.0"},
    "paths": {
        "/accounts/{accountId}": {
            "get": {
                "summary": "Get account",
                "parameters": [{"name": "accountId", "in": "path", "required": True, "schema": {"type": "string"}}],
                "responses": {"200": {"description": "ok"}},
            }
        }
    },
}


def _strategy(source) -> OpenApiStrategy:
    return OpenApiStrategy(str(source), MockDataGenerator(seed=5, now=NOW))


class TestOpenApiStrategy:
    def test_single_parameterized_get(self, tmp_path):
        f = tmp_path / "openapi.json"
        f.write_text(json.dumps(SINGLE_GET))
        collection = _strategy(f).extract(GenerateOptions())

        (request,) = list(iter_requests(collection["item"]))
        url = request["request"]["url"]
        assert url["path"] == ["accounts", "{{accountId}}"]
        assert url["raw"] == "{{baseUrl}}/accounts/{{accountId}}"
        assert "accountId" in [v["key"] for v in collection["variable"]]

    def test_petstore_collection(self):
        collection = _strategy(PETSTORE).extract(GenerateOptions(base_url="http://localhost:9000"))

        variables = {v["key"]: v["value"] for v in collection["variable"]}
        assert variables["baseUrl"] == "http://localhost:9000"
        assert variables["petId"] == "1"
        assert variables["token"] == "<JWT_TOKEN_HERE>"

        names = [i["name"] for i in iter_requests(collection["item"])]
        assert names == ["List Pets", "Info For A Specific Pet", "Create A Pet"]

    def test_openapi_format_returns_document(self):
        document = _strategy(PETSTORE).extract(
            GenerateOptions(format="openapi", base_url="https://pets.example.com")
        )
        assert document["info"]["title"] == "Petstore"
        assert document["servers"] == [{"url": "https://pets.example.com"}]

    def test_invalid_document_raises(self, tmp_path):
        f = tmp_path / "openapi.yaml"
        f.write_text("openapi: 3.0.0\ninfo:\n  title: Empty\npaths: {}\n")
        with pytest.raises(InvalidDocument):
            _strategy(f).extract(GenerateOptions())

    def test_validate(self, tmp_path):
        assert _strategy(PETSTORE).validate() is True
        assert _strategy(tmp_path / "missing.yaml").validate() is False

    @patch("springboot2postman.openapi.fetcher.requests.get")
    def test_url_source_is_fetched_once(self, mock_get):
        response = MagicMock()
        response.headers = {"content-type": "application/json"}
        response.json.return_value = SINGLE_GET
        mock_get.return_value = response

        strategy = _strategy("https://accounts.example.com/v3/api-docs")
        assert strategy.validate()
        strategy.extract(GenerateOptions())
        mock_get.assert_called_once()


class TestDetectStrategy:
    def test_url(self):
        strategy = detect_strategy("https://api.example.com/openapi.json")
        assert isinstance(strategy, OpenApiStrategy)
        assert strategy.source == "https://api.example.com/openapi.json"

    def test_document_file(self):
        assert isinstance(detect_strategy(str(PETSTORE)), OpenApiStrategy)

    def test_bundled_document_preferred_over_sources(self, tmp_path):
        project = tmp_path / "project"
        shutil.copytree(SPRING_PROJECT, project)
        shutil.copy(PETSTORE, project / "openapi.yaml")

        strategy = detect_strategy(str(project))
        assert isinstance(strategy, OpenApiStrategy)
        assert strategy.source == str(project / "openapi.yaml")
        assert find_openapi_file(project) == str(project / "openapi.yaml")

    def test_invalid_bundled_document_falls_through(self, tmp_path):
        project = tmp_path / "project"
        shutil.copytree(SPRING_PROJECT, project)
        (project / "swagger.json").write_text("{}")

        assert isinstance(detect_strategy(str(project)), ParserStrategy)

    def test_sources(self):
        strategy = detect_strategy(str(SPRING_PROJECT))
        assert isinstance(strategy, ParserStrategy)
        assert strategy.name == "ParserStrategy"

    def test_nothing_found(self, tmp_path):
        assert detect_strategy(str(tmp_path)) is None

    def test_missing_path(self, tmp_path):
        with pytest.raises(ProjectNotFound):
            detect_strategy(str(tmp_path / "missing"))
