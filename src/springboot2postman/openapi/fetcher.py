"""Loads OpenAPI / Swagger documents from local files or remote URLs."""

import json
import logging
from pathlib import Path

import requests
import yaml

from springboot2postman.errors import FetchFailed, InvalidDocument, ProjectNotFound
from springboot2postman.fileutils import get_extension, is_url, path_exists, read_file

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30
ACCEPT_HEADER = "application/json, application/yaml, application/x-yaml"


class OpenApiFetcher:
    """Fetches and validates an OpenAPI document."""

    def fetch(self, source: str | Path) -> dict:
        logger.debug("Fetching OpenAPI from: %s", source)
        if is_url(str(source)):
            return self.fetch_from_url(str(source))
        return self.fetch_from_file(source)

    def fetch_from_url(self, url: str) -> dict:
        try:
            logger.debug("Making HTTP request to: %s", url)
            response = requests.get(url, headers={"Accept": ACCEPT_HEADER}, timeout=FETCH_TIMEOUT)
            response.raise_for_status()

            content_type = response.headers.get("content-type", "")
            if "yaml" in content_type or "yml" in content_type:
                return yaml.safe_load(response.text)
            try:
                return response.json()
            except ValueError:
                return yaml.safe_load(response.text)
        except (requests.RequestException, yaml.YAMLError) as e:
            raise FetchFailed(url, e) from e

    def fetch_from_file(self, filepath: str | Path) -> dict:
        if not path_exists(filepath):
            raise ProjectNotFound(str(filepath))

        try:
            logger.debug("Reading file: %s", filepath)
            content = read_file(filepath)
            if get_extension(filepath) == ".json":
                return json.loads(content)
            # YAML is a superset of JSON, so anything else goes through the YAML loader.
            return yaml.safe_load(content)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise FetchFailed(str(filepath), e) from e

    def validate(self, spec) -> bool:
        """Check the version field family and that paths is a non-empty mapping."""
        if not isinstance(spec, dict):
            raise InvalidDocument("Specification is not a valid object")

        if "openapi" in spec:
            if not str(spec["openapi"]).startswith("3."):
                raise InvalidDocument(f"Unsupported OpenAPI version: {spec['openapi']}")
        elif "swagger" in spec:
            if str(spec["swagger"]) != "2.0":
                raise InvalidDocument(f"Unsupported Swagger version: {spec['swagger']}")
        else:
            raise InvalidDocument('Missing "openapi" or "swagger" version field')

        paths = spec.get("paths")
        if not isinstance(paths, dict) or not paths:
            raise InvalidDocument('Missing or invalid "paths" field')

        logger.debug("Valid %s specification", spec.get("openapi") or f"Swagger {spec.get('swagger')}")
        return True
