"""Synthesizes realistic example values for fields, types and DTOs.

Field names are matched against an ordered rule table before the declared
type is consulted: a field called "email" gets an email address whatever its
Java type says. A seed and a reference time make output reproducible.
"""

import re
import zlib
from datetime import datetime, timedelta
from typing import Any, Callable

from faker import Faker

from springboot2postman.parser import type_resolver
from springboot2postman.parser.base import DtoField

SERVER_ASSIGNED_FIELDS = ("id", "createdAt", "updatedAt")

ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}

RECENT_DAYS = 30


class MockDataGenerator:
    """Generates example values backed by Faker."""

    def __init__(self, seed: int | None = None, now: datetime | None = None):
        self.seed = seed
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)
        self.now = now or datetime.now()
        self.field_rules = self._field_rules()
        self.type_generators = self._type_generators()

    def fork(self, key: str) -> "MockDataGenerator":
        """A generator of its own for one unit of work, seeded from this seed and key.

        Forked output depends only on the seed, the key and the reference time,
        never on how many values other units drew first.
        """
        seed = None if self.seed is None else zlib.crc32(f"{self.seed}:{key}".encode("utf-8"))
        return MockDataGenerator(seed=seed, now=self.now)

    def _field_rules(self) -> list[tuple[re.Pattern, Callable[[], Any]]]:
        f = self.fake
        rules = [
            (r"email", f.email),
            (r"^name$|firstName|lastName|fullName", f.name),
            (r"^firstName$", f.first_name),
            (r"^lastName$", f.last_name),
            (r"username|login", f.user_name),
            (r"password", lambda: "********"),
            (r"phone|mobile|tel", f.phone_number),
            (r"address|street", f.street_address),
            (r"city", f.city),
            (r"state|province", f.state),
            (r"country", f.country),
            (r"zip|postal", f.postcode),
            (r"url|website|link", f.url),
            (r"image|avatar|photo|picture", f.image_url),
            (r"title", lambda: f.sentence(nb_words=3)),
            (r"description|bio|about|summary", lambda: f.paragraph(nb_sentences=1)),
            (r"content|body|text", lambda: "\n".join(f.paragraphs(nb=2))),
            (r"company|organization", f.company),
            (r"job|position|role", f.job),
            (r"price|amount|cost|total", lambda: round(f.pyfloat(min_value=1, max_value=1000, right_digits=2), 2)),
            (r"quantity|count|qty", lambda: f.random_int(min=1, max=100)),
            (r"age", lambda: f.random_int(min=18, max=80)),
            (r"rating|score", lambda: f.random_int(min=1, max=5)),
            (r"status", lambda: f.random_element(["ACTIVE", "INACTIVE", "PENDING"])),
            (r"type|category", lambda: f.random_element(["TYPE_A", "TYPE_B", "TYPE_C"])),
            (r"uuid|guid", f.uuid4),
            (r"token", lambda: f.lexify("?" * 32)),
            (r"code", lambda: f.bothify("????####").upper()),
        ]
        return [(re.compile(pattern, re.IGNORECASE), producer) for pattern, producer in rules]

    def _type_generators(self) -> dict[str, Callable[[str], Any]]:
        f = self.fake
        small_int = lambda _: f.random_int(min=1, max=100)
        big_int = lambda _: f.random_int(min=1, max=10000)
        decimal = lambda _: round(f.pyfloat(min_value=0, max_value=1000, right_digits=2), 2)
        return {
            "String": self._string_value,
            "char": lambda _: "A",
            "Character": lambda _: "A",
            "int": small_int,
            "Integer": small_int,
            "short": small_int,
            "Short": small_int,
            "long": big_int,
            "Long": big_int,
            "byte": lambda _: f.random_int(min=0, max=127),
            "Byte": lambda _: f.random_int(min=0, max=127),
            "float": decimal,
            "Float": decimal,
            "double": decimal,
            "Double": decimal,
            "BigDecimal": lambda _: round(f.pyfloat(min_value=0, max_value=10000, right_digits=2), 2),
            "BigInteger": lambda _: f.random_int(min=1, max=1000000),
            "boolean": lambda _: f.pybool(),
            "Boolean": lambda _: f.pybool(),
            "Date": lambda _: self.recent().isoformat() + "Z",
            "LocalDate": lambda _: self.recent().date().isoformat(),
            "LocalTime": lambda _: self.recent().time().isoformat(timespec="seconds"),
            "LocalDateTime": lambda _: self.recent().isoformat(timespec="seconds"),
            "ZonedDateTime": lambda _: self.recent().isoformat() + "Z",
            "OffsetDateTime": lambda _: self.recent().isoformat() + "Z",
            "Instant": lambda _: self.recent().isoformat() + "Z",
            "Timestamp": lambda _: self.recent().isoformat() + "Z",
            "UUID": lambda _: f.uuid4(),
            "Object": lambda _: {},
        }

    def recent(self) -> datetime:
        """A random moment within the last RECENT_DAYS before the reference time."""
        return self.fake.date_time_between(
            start_date=self.now - timedelta(days=RECENT_DAYS), end_date=self.now
        ).replace(microsecond=0)

    def for_field(self, field_name: str, java_type: str | None):
        for pattern, producer in self.field_rules:
            if pattern.search(field_name):
                return producer()
        return self.for_type(java_type, field_name)

    def for_type(self, java_type: str | None, field_name: str = ""):
        if not java_type:
            return "example"

        base = type_resolver.base_type(java_type)
        if base in self.type_generators and "<" not in java_type:
            return self.type_generators[base](field_name)

        if type_resolver.is_collection(java_type) or base in type_resolver.STREAMS:
            inner = type_resolver.extract_generic_type(java_type)
            return [self.for_type(inner, field_name), self.for_type(inner, field_name)]
        if base in type_resolver.MAPS:
            return {"key1": "value1", "key2": "value2"}
        if base in type_resolver.UNWRAPPED:
            return self.for_type(type_resolver.extract_generic_type(java_type), field_name)
        if base in self.type_generators:
            return self.type_generators[base](field_name)
        return None

    def _string_value(self, field_name: str) -> str:
        for pattern, producer in self.field_rules:
            if pattern.search(field_name):
                return str(producer())
        return self.fake.word()

    def dto_example(self, dto_name: str, fields: list[DtoField] | None) -> dict:
        example: dict[str, Any] = {}
        if "user" in dto_name.lower():
            example["id"] = self.fake.random_int(min=1, max=1000)
            example["name"] = self.fake.name()
            example["email"] = self.fake.email()

        for field in fields or []:
            if field.name not in example:
                example[field.name] = self.for_field(field.name, field.type)
        return example

    def request_example(self, dto_name: str, fields: list[DtoField] | None, method: str = "POST") -> dict:
        """Example request body; server-assigned fields are dropped for writes."""
        example = self.dto_example(dto_name, fields)
        if method in ("POST", "PUT", "PATCH"):
            for name in SERVER_ASSIGNED_FIELDS:
                example.pop(name, None)
        return example

    def response_example(self, dto_name: str, fields: list[DtoField] | None, method: str = "GET") -> dict:
        """Example response body; always carries an id and a creation timestamp."""
        example = self.dto_example(dto_name, fields)
        if example.get("id") is None:
            example["id"] = self.fake.random_int(min=1, max=1000)
        if example.get("createdAt") is None:
            example["createdAt"] = self.recent().isoformat() + "Z"
        return example

    def list_response(self, dto_name: str, fields: list[DtoField] | None, count: int = 2) -> list[dict]:
        return [self.response_example(dto_name, fields, "GET") for _ in range(count)]

    def error_response(self, status: int, message: str, path: str) -> dict:
        return {
            "timestamp": self.now.replace(microsecond=0).isoformat() + "Z",
            "status": status,
            "error": ERROR_NAMES.get(status, "Error"),
            "message": message,
            "path": path,
        }
