"""File-system primitives shared by the scanners, fetcher and CLI."""

from pathlib import Path

from springboot2postman.errors import ProjectNotFound


def path_exists(path: str | Path) -> bool:
    return Path(path).exists()


def is_directory(path: str | Path) -> bool:
    return Path(path).is_dir()


def is_file(path: str | Path) -> bool:
    return Path(path).is_file()


def read_file(path: str | Path) -> str:
    """Read a UTF-8 text file, raising ProjectNotFound if it is missing."""
    file_path = Path(path)
    if not file_path.exists():
        raise ProjectNotFound(str(path))
    return file_path.read_text(encoding="utf-8")


def write_file(path: str | Path, content: str) -> None:
    """Write text to a file, creating parent directories as needed."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def get_extension(path: str | Path) -> str:
    return Path(path).suffix.lower()


def glob_files(root: str | Path, pattern: str) -> list[str]:
    """Return files (not directories) under root matching a recursive glob, sorted."""
    return sorted(str(p) for p in Path(root).glob(pattern) if p.is_file())
