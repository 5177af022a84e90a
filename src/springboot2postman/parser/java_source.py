"""Heuristic Java source extraction.

Class, method and parameter metadata is pulled out of raw text with a chain
of regular expressions. There is no grammar and no symbol table: anything the
patterns do not recognize is skipped rather than rejected.
"""

import logging
import re
from pathlib import Path

from springboot2postman.errors import ParseError
from springboot2postman.fileutils import read_file
from springboot2postman.parser.base import Annotation, ClassInfo, MethodInfo, RawParameter, SourceFile

logger = logging.getLogger(__name__)

PACKAGE_RE = re.compile(r"package\s+([\w.]+);")
CLASS_RE = re.compile(r"(?:public\s+)?class\s+(\w+)")
ANNOTATION_LINE_RE = re.compile(r"@(\w+)(?:\((.+)\))?")
PARAM_ANNOTATION_RE = re.compile(r"@(\w+)(?:\((?:[^()]|\([^()]*\))*\))?")

# One level of nested generics (ResponseEntity<List<User>>) and one level of
# nested parentheses inside the parameter list (@RequestParam(required = false)).
_GENERIC = r"<(?:[^<>]|<[^<>]*>)*>"
METHOD_RE = re.compile(
    r"(?:public|private|protected)\s+"
    r"(?:(?:static|final|abstract|synchronized)\s+)*"
    rf"(?:{_GENERIC}\s+)?"
    rf"(\w+(?:{_GENERIC})?(?:\[\])?)\s+"
    r"(\w+)\s*"
    r"\(((?:[^()]|\([^()]*\))*)\)"
)

COMMENT_PREFIXES = ("//", "/*", "*")


class JavaSourceParser:
    """Extracts class, method and parameter metadata from Java source text."""

    def parse_file(self, filepath: str | Path) -> tuple[SourceFile, ClassInfo]:
        """Read a file and extract its class info.

        Any failure is wrapped in ParseError so callers can isolate bad files.
        """
        logger.debug("Parsing Java file: %s", filepath)
        try:
            content = read_file(filepath)
            return SourceFile(path=str(filepath), content=content), self.extract_class_info(content)
        except Exception as e:
            raise ParseError(str(filepath), e) from e

    def extract_class_info(self, content: str) -> ClassInfo:
        package_match = PACKAGE_RE.search(content)
        class_match = CLASS_RE.search(content)

        annotations: list[Annotation] = []
        if class_match:
            annotations = collect_annotations(content, class_match.start())

        return ClassInfo(
            package_name=package_match.group(1) if package_match else None,
            class_name=class_match.group(1) if class_match else "Unknown",
            annotations=annotations,
        )

    def extract_methods(self, content: str) -> list[MethodInfo]:
        methods = []
        for match in METHOD_RE.finditer(content):
            offset = match.start()
            methods.append(
                MethodInfo(
                    name=match.group(2),
                    return_type=match.group(1),
                    parameters=match.group(3),
                    annotations=collect_annotations(content, offset),
                    offset=offset,
                    line_number=content.count("\n", 0, offset) + 1,
                )
            )
        return methods

    def parse_parameters(self, param_text: str) -> list[RawParameter]:
        """Split a raw parameter list into typed, annotated declarations."""
        if not param_text or not param_text.strip():
            return []

        params = []
        for part in split_top_level(param_text):
            part = " ".join(part.split())
            if not part:
                continue

            annotations = []
            for match in PARAM_ANNOTATION_RE.finditer(part):
                annotations.append(Annotation(name=match.group(1), raw=match.group(0)))
            clean = PARAM_ANNOTATION_RE.sub("", part).strip()

            tokens = [t for t in clean.split() if t != "final"]
            if len(tokens) < 2:
                continue
            params.append(RawParameter(name=tokens[-1], type=" ".join(tokens[:-1]), annotations=annotations))
        return params


def collect_annotations(content: str, offset: int) -> list[Annotation]:
    """Collect the directive lines written immediately above offset.

    Lines are scanned backward; blank and comment lines are skipped and the
    scan stops at the first line that is neither a directive nor a comment.
    """
    annotations: list[Annotation] = []
    for line in reversed(content[:offset].split("\n")):
        line = line.strip()
        if not line:
            continue
        if line.startswith("@"):
            match = ANNOTATION_LINE_RE.match(line)
            if match:
                annotations.insert(0, Annotation(name=match.group(1), raw=line, value=match.group(2)))
        elif not line.startswith(COMMENT_PREFIXES):
            break
    return annotations


def split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside <>, () or quotes."""
    parts = []
    depth = 0
    in_string = False
    current = []
    for ch in text:
        if ch == '"':
            in_string = not in_string
        elif not in_string:
            if ch in "<(":
                depth += 1
            elif ch in ">)":
                depth -= 1
            elif ch == "," and depth == 0:
                parts.append("".join(current))
                current = []
                continue
        current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts]
