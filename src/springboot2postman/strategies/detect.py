"""Picks the strategy for a project path or URL."""

import logging
from pathlib import Path

from springboot2postman.errors import ProjectNotFound
from springboot2postman.fileutils import is_directory, is_file, is_url
from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.strategies.base import BaseStrategy
from springboot2postman.strategies.openapi_strategy import OpenApiStrategy
from springboot2postman.strategies.parser_strategy import ParserStrategy

logger = logging.getLogger(__name__)

OPENAPI_CANDIDATES = [
    "openapi.json",
    "openapi.yaml",
    "openapi.yml",
    "swagger.json",
    "swagger.yaml",
    "swagger.yml",
]


def find_openapi_file(project: str | Path) -> str | None:
    """Return the first candidate document present in the project directory."""
    for name in OPENAPI_CANDIDATES:
        candidate = Path(project) / name
        if is_file(candidate):
            return str(candidate)
    return None


def detect_strategy(project: str, mock_generator: MockDataGenerator | None = None) -> BaseStrategy | None:
    """Return a strategy able to handle project, or None if there is none.

    Order: URL, document file, bundled document, controller sources.
    Raises ProjectNotFound if project is neither a URL nor an existing path.
    """
    if is_url(project):
        logger.debug("Detected OpenAPI URL")
        return OpenApiStrategy(project, mock_generator)

    if is_file(project):
        logger.debug("Detected OpenAPI document file")
        return OpenApiStrategy(project, mock_generator)

    if not is_directory(project):
        raise ProjectNotFound(project)

    document = find_openapi_file(project)
    if document:
        strategy = OpenApiStrategy(document, mock_generator)
        if strategy.validate():
            logger.info("Found OpenAPI document: %s", document)
            return strategy
        logger.debug("Ignoring unusable document: %s", document)

    parser = ParserStrategy(project, mock_generator)
    if parser.validate():
        logger.debug("Detected Spring Boot controllers")
        return parser

    return None
