"""Error taxonomy for springboot2postman.

Every failure that can stop a run derives from Springboot2PostmanError and
carries a machine-readable code plus a details dict for the CLI to surface.
"""


class Springboot2PostmanError(Exception):
    """Base exception for all springboot2postman errors."""

    def __init__(self, message: str, code: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ProjectNotFound(Springboot2PostmanError):
    """Raised when the project path is missing or is not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Project path does not exist: {path}", "PROJECT_NOT_FOUND", {"path": str(path)})


class NoControllersFound(Springboot2PostmanError):
    """Raised when no file qualifies as a controller after filtering."""

    def __init__(self, path: str):
        super().__init__("No Spring Boot controllers found in project", "NO_CONTROLLERS_FOUND", {"path": str(path)})


class FetchFailed(Springboot2PostmanError):
    """Raised when an OpenAPI document cannot be read or downloaded."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(
            f"Failed to fetch OpenAPI spec from: {source}",
            "OPENAPI_FETCH_FAILED",
            {"source": str(source), "cause": str(cause)},
        )


class InvalidDocument(Springboot2PostmanError):
    """Raised when a fetched document is not a usable OpenAPI/Swagger spec."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid OpenAPI specification: {reason}", "INVALID_OPENAPI", {"reason": reason})


class ParseError(Springboot2PostmanError):
    """Raised when a single controller file cannot be extracted."""

    def __init__(self, file: str, cause: Exception):
        super().__init__(f"Failed to parse Java file: {file}", "PARSE_ERROR", {"file": str(file), "cause": str(cause)})
        self.file = str(file)


class ConversionFailed(Springboot2PostmanError):
    """Raised when the document-to-collection conversion fails or is empty."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to convert to Postman collection: {reason}", "CONVERSION_FAILED", {"reason": reason})
