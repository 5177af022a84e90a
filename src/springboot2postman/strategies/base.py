"""Common interface for the ways a collection can be produced."""

from abc import ABC, abstractmethod

from springboot2postman.config import GenerateOptions

# Fixed options passed to the document-to-collection conversion.
CONVERSION_OPTIONS = {
    "folder_strategy": "Tags",
    "parameters_resolution": "Example",
}


class BaseStrategy(ABC):
    """A source of API descriptions that can be turned into a collection."""

    def __init__(self, source: str):
        self.source = source

    @abstractmethod
    def validate(self) -> bool:
        """Return True if this strategy can handle the source."""

    @abstractmethod
    def extract(self, options: GenerateOptions | None = None) -> dict:
        """Produce the output document (a collection, or OpenAPI when requested)."""

    @property
    def name(self) -> str:
        return type(self).__name__
