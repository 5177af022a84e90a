"""Data models produced by heuristic extraction of Java source files.

These records are owned by a single extraction call and are folded into
IR endpoints once a controller file has been processed.
"""

from typing import Literal

from pydantic import BaseModel

ParamLocation = Literal["path", "query", "header", "body"]


class SourceFile(BaseModel):
    """A source file read once for parsing."""

    path: str
    content: str


class Annotation(BaseModel):
    """A directive line such as @GetMapping("/{id}"). Not an AST node."""

    name: str
    raw: str
    value: str | None = None  # text inside the outermost parentheses


class ClassInfo(BaseModel):
    package_name: str | None
    class_name: str
    annotations: list[Annotation] = []


class MethodInfo(BaseModel):
    name: str
    return_type: str
    parameters: str  # raw parameter text between the parentheses
    annotations: list[Annotation] = []
    offset: int
    line_number: int


class RawParameter(BaseModel):
    """One parameter declaration split out of a method signature."""

    name: str
    type: str
    annotations: list[Annotation] = []


class ParameterInfo(BaseModel):
    """A classified parameter with its binding location."""

    name: str
    type: str
    location: ParamLocation
    required: bool = True
    default_value: str | None = None


class DtoField(BaseModel):
    name: str
    type: str


class DtoDescriptor(BaseModel):
    name: str
    fields: list[DtoField]
    filepath: str | None = None
