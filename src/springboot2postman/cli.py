"""CLI entry point for springboot2postman."""

import json
import logging
import traceback

import click

from springboot2postman.config import DEFAULT_CONCURRENCY, GenerateOptions
from springboot2postman.errors import Springboot2PostmanError
from springboot2postman.fileutils import write_file
from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.postman.enhancer import iter_requests
from springboot2postman.strategies.detect import detect_strategy

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")


class ClickEchoHandler(logging.Handler):
    """Routes log records through click.echo so they land on the active stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("springboot2postman")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, ClickEchoHandler) for h in package_logger.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        package_logger.addHandler(handler)


def count_endpoints(document: dict) -> int:
    """Number of requests in a collection, or operations in an OpenAPI document."""
    if "paths" in document:
        return sum(
            1 for operations in document["paths"].values() for method in operations if method in HTTP_METHODS
        )
    return sum(1 for _ in iter_requests(document.get("item", [])))


def document_name(document: dict) -> str:
    info = document.get("info") or {}
    return info.get("name") or info.get("title") or "API"


@click.command()
@click.option("--project", required=True, help="Project path or OpenAPI URL.")
@click.option("--out", default="./postman_collection.json", show_default=True, help="Output file path.")
@click.option("--base-url", default=None, help="Base URL override.")
@click.option("--format", "fmt", default="postman", type=click.Choice(["postman", "openapi"]), help="Output format.")
@click.option("--include", default=None, help="Include only matching files (comma-separated glob patterns).")
@click.option("--exclude", default=None, help="Exclude matching files (comma-separated glob patterns).")
@click.option(
    "--concurrency", default=DEFAULT_CONCURRENCY, type=click.IntRange(min=1), show_default=True,
    help="Max parallel file parsing.",
)
@click.option("--seed", default=None, type=int, help="Seed for reproducible example data.")
@click.option("--verbose", is_flag=True, default=False, help="Verbose output.")
def main(
    project: str,
    out: str,
    base_url: str | None,
    fmt: str,
    include: str | None,
    exclude: str | None,
    concurrency: int,
    seed: int | None,
    verbose: bool,
):
    """Generate Postman collections automatically from Spring Boot projects."""
    _configure_logging(verbose)
    click.echo(f"Analyzing {project}...")

    try:
        strategy = detect_strategy(project, MockDataGenerator(seed=seed))
        if strategy is None:
            click.echo("Could not find OpenAPI specification or Spring Boot controllers", err=True)
            click.echo("Make sure your project has:", err=True)
            click.echo("  - OpenAPI/Swagger specification (JSON/YAML), OR", err=True)
            click.echo("  - Spring Boot controllers with @RestController annotation", err=True)
            raise SystemExit(1)

        logger.debug("Using strategy: %s", strategy.name)
        options = GenerateOptions(
            base_url=base_url, format=fmt, include=include, exclude=exclude, concurrency=concurrency
        )
        document = strategy.extract(options)

        write_file(out, json.dumps(document, indent=2, ensure_ascii=False))
    except Springboot2PostmanError as e:
        click.echo(f"Generation failed: {e.message}", err=True)
        if verbose:
            click.echo("".join(traceback.format_exception(e)), err=True)
        click.echo(f"Error code: {e.code}", err=True)
        raise SystemExit(1)

    click.echo("Collection generated successfully!")
    click.echo(f"Output: {out}")
    click.echo(f"Collection: {document_name(document)}")
    click.echo(f"Endpoints: {count_endpoints(document)} total")
