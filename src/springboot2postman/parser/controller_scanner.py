"""Discovers Spring controller source files in a project tree."""

import logging
import re
from pathlib import Path

from springboot2postman.errors import NoControllersFound, ProjectNotFound
from springboot2postman.fileutils import glob_files, is_directory, path_exists, read_file

logger = logging.getLogger(__name__)

# Tried in order; the first tier that yields any file wins.
SEARCH_TIERS = [
    "src/main/java/**/*Controller.java",
    "src/main/java/**/*RestController.java",
    "src/**/*.java",
]


class ControllerScanner:
    """Finds, filters and classifies candidate controller files."""

    def find_controllers(
        self,
        project_path: str | Path,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
    ) -> list[str]:
        """Return controller file paths under project_path.

        Raises ProjectNotFound for a missing root and NoControllersFound when
        nothing qualifies after filtering and classification.
        """
        logger.debug("Scanning for controllers in: %s", project_path)

        if not path_exists(project_path):
            raise ProjectNotFound(str(project_path))
        if not is_directory(project_path):
            raise ProjectNotFound(f"{project_path} is not a directory")

        java_files: list[str] = []
        for pattern in SEARCH_TIERS:
            logger.debug("Searching pattern: %s", pattern)
            found = glob_files(project_path, pattern)
            java_files.extend(found)
            if found:
                logger.debug("Found %d files with pattern", len(found))
                break

        java_files = list(dict.fromkeys(java_files))
        if not java_files:
            raise NoControllersFound(str(project_path))

        java_files = self.apply_filters(java_files, include, exclude)
        logger.debug("Found %d Java files after filtering, checking for controllers...", len(java_files))

        controllers = [f for f in java_files if self.is_controller(f)]
        if not controllers:
            raise NoControllersFound(str(project_path))

        logger.info("Found %d controller(s)", len(controllers))
        return controllers

    def apply_filters(self, files: list[str], include: list[str] | None, exclude: list[str] | None) -> list[str]:
        """Keep files matching any include pattern, then drop any matching an exclude pattern."""
        filtered = files
        if include:
            filtered = [f for f in filtered if any(matches_pattern(f, p) for p in include)]
            logger.debug("Include filter applied: %d files remaining", len(filtered))
        if exclude:
            filtered = [f for f in filtered if not any(matches_pattern(f, p) for p in exclude)]
            logger.debug("Exclude filter applied: %d files remaining", len(filtered))
        return filtered

    def is_controller(self, filepath: str) -> bool:
        try:
            content = read_file(filepath)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Failed to read %s: %s", filepath, e)
            return False

        has_rest_controller = "@RestController" in content
        has_controller = "@Controller" in content
        has_response_body = "@ResponseBody" in content
        has_request_mapping = "@RequestMapping" in content

        return has_rest_controller or (has_controller and (has_response_body or has_request_mapping))

    def controller_info(self, filepath: str) -> dict:
        """Summarize a controller file: path, class name and line count."""
        content = read_file(filepath)
        match = re.search(r"class\s+(\w+)", content)
        return {
            "filepath": filepath,
            "class_name": match.group(1) if match else "Unknown",
            "line_count": len(content.split("\n")),
        }


def matches_pattern(filepath: str, pattern: str) -> bool:
    """Glob-style search: ** spans directories, * stays within one segment."""
    filepath = filepath.replace("\\", "/")
    regex = re.escape(pattern.strip())
    regex = regex.replace(r"\*\*", "\0").replace(r"\*", "[^/]*").replace("\0", ".*")
    return re.search(regex, filepath) is not None
