"""Scope resolution: which files of a repository participate in a check."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Iterator

from pydantic import BaseModel, Field

from policy_gate.utils.logging import get_logger

logger = get_logger("scope")


class ScopeRule(BaseModel):
    """Predicates deciding whether a discovered file takes part in a check.

    Paths are repository-relative POSIX paths. ``prune_dirs`` names
    directories that are never descended into; every other directory is
    always descended, even when all of its files end up skipped.
    """

    model_config = {"frozen": True}

    extensions: tuple[str, ...] = Field(default=(), description="Allowed file extensions; empty allows all")
    skip_prefixes: tuple[str, ...] = Field(default=())
    skip_suffixes: tuple[str, ...] = Field(default=())
    skip_substrings: tuple[str, ...] = Field(default=())
    prune_dirs: tuple[str, ...] = Field(default=())

    @classmethod
    def from_settings(cls, settings: BaseModel) -> "ScopeRule":
        """Build a rule from the same-named list fields of a settings model."""
        return cls(**{
            name: tuple(getattr(settings, name))
            for name in cls.model_fields
            if hasattr(settings, name)
        })

    def descends(self, dir_name: str) -> bool:
        """Whether traversal enters a directory with this name."""
        return dir_name not in self.prune_dirs

    def participates(self, path: str) -> bool:
        """Whether a file path is part of the check."""
        if self.extensions and PurePosixPath(path).suffix not in self.extensions:
            return False
        if any(path.startswith(p) for p in self.skip_prefixes):
            return False
        if any(path.endswith(s) for s in self.skip_suffixes):
            return False
        if any(s in path for s in self.skip_substrings):
            return False
        return True


class FileSource(ABC):
    """Read-only view of a repository tree addressed by relative POSIX paths."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        ...

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """Names of the direct children of a directory."""
        ...

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        ...

    def is_symlink(self, path: str) -> bool:
        return False

    def read_text(self, path: str) -> str:
        return self.read_bytes(path).decode("utf-8", errors="replace")


class DiskFileSource(FileSource):
    """File source backed by a directory on disk."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path if path else self.root

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def is_dir(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def is_symlink(self, path: str) -> bool:
        return self._resolve(path).is_symlink()

    def list_dir(self, path: str) -> list[str]:
        return [child.name for child in self._resolve(path).iterdir()]

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()


class MemoryFileSource(FileSource):
    """In-memory file source for testing.

    Directories are implied by the paths of the files they contain.
    """

    def __init__(self, files: dict[str, bytes | str]):
        self._files = {
            k.strip("/"): v.encode("utf-8") if isinstance(v, str) else v
            for k, v in files.items()
        }

    def exists(self, path: str) -> bool:
        return path in self._files or self.is_dir(path)

    def is_dir(self, path: str) -> bool:
        if not path:
            return True
        prefix = path.rstrip("/") + "/"
        return any(k.startswith(prefix) for k in self._files)

    def list_dir(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/" if path else ""
        names = {k[len(prefix):].split("/", 1)[0] for k in self._files if k.startswith(prefix)}
        return list(names)

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


def _walk(source: FileSource, directory: str, rule: ScopeRule) -> Iterator[str]:
    for name in sorted(source.list_dir(directory)):
        child = f"{directory}/{name}" if directory else name
        if source.is_dir(child):
            if source.is_symlink(child):
                logger.debug(f"Not following directory symlink: {child}")
                continue
            if rule.descends(name):
                yield from _walk(source, child, rule)
            continue
        if source.is_symlink(child) and not source.exists(child):
            logger.debug(f"Skipping dangling symlink: {child}")
            continue
        if rule.participates(child):
            yield child


def resolve_scope(source: FileSource, roots: list[str], rule: ScopeRule) -> list[str]:
    """Resolve the files of a check.

    Args:
        source: Repository file source
        roots: Root directories (or single files) relative to the repository
        rule: Participation rule applied during traversal

    Returns:
        Sorted, de-duplicated repository-relative paths. Missing roots
        contribute nothing.
    """
    found: set[str] = set()
    for root in roots:
        root = root.strip("/")
        if not source.exists(root):
            logger.debug(f"Scope root not found, skipping: {root}")
            continue
        if source.is_dir(root):
            found.update(_walk(source, root, rule))
        elif rule.participates(root):
            found.add(root)

    files = sorted(found)
    logger.debug(f"Resolved {len(files)} files under {', '.join(roots)}")
    return files


def count_lines(text: str) -> int:
    """Count newline-separated segments; a trailing newline adds an empty one."""
    return len(text.replace("\r\n", "\n").split("\n"))
