"""Strategy for projects that already ship an OpenAPI / Swagger document."""

import logging

from springboot2postman.config import GenerateOptions
from springboot2postman.errors import Springboot2PostmanError
from springboot2postman.generator.mock_data import MockDataGenerator
from springboot2postman.openapi.converter import OpenApiConverter
from springboot2postman.openapi.fetcher import OpenApiFetcher
from springboot2postman.postman.enhancer import PostmanEnhancer
from springboot2postman.strategies.base import CONVERSION_OPTIONS, BaseStrategy

logger = logging.getLogger(__name__)


class OpenApiStrategy(BaseStrategy):
    """Fetch, validate, convert and enhance an existing document."""

    def __init__(self, source: str, mock_generator: MockDataGenerator | None = None):
        super().__init__(source)
        self.fetcher = OpenApiFetcher()
        self.converter = OpenApiConverter()
        self.enhancer = PostmanEnhancer(mock_generator or MockDataGenerator())
        self._document: dict | None = None

    def validate(self) -> bool:
        try:
            self.fetcher.validate(self._fetch())
            return True
        except Springboot2PostmanError as e:
            logger.debug("Not a usable OpenAPI source %s: %s", self.source, e)
            return False

    def extract(self, options: GenerateOptions | None = None) -> dict:
        options = options or GenerateOptions()
        logger.debug("Using OpenAPI strategy")

        spec = self._fetch()
        self.fetcher.validate(spec)

        if options.format == "openapi":
            if options.base_url and "openapi" in spec:
                spec["servers"] = [{"url": options.base_url}]
            return spec

        collection = self.converter.convert(spec, CONVERSION_OPTIONS)
        collection = self.converter.apply_base_url(collection, options.base_url)
        return self.enhancer.enhance(collection, options)

    def _fetch(self) -> dict:
        if self._document is None:
            self._document = self.fetcher.fetch(self.source)
        return self._document
