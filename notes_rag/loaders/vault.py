from __future__ import annotations

"""Markdown note vault used as the query-time corpus."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from notes_rag.rag.types import Document


class CorpusError(RuntimeError):
    """Raised when the corpus cannot be listed or read."""
    pass


class CorpusSource(Protocol):
    """Protocol for anything that can hand over the full corpus text."""

    def list_documents(self) -> list[Any]:
        raise NotImplementedError

    def read(self, handle: Any) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class MarkdownVault:
    """Directory of Markdown notes, read recursively."""
    root: Path
    pattern: str = "*.md"

    def list_documents(self) -> list[Path]:
        """Return note paths in a stable, sorted order."""
        root = Path(self.root)
        if not root.is_dir():
            raise CorpusError(f"Notes directory not found: {root}")
        return sorted(path for path in root.rglob(self.pattern) if path.is_file())

    def read(self, handle: Path) -> str:
        """Read a note as UTF-8 text."""
        try:
            return Path(handle).read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            raise CorpusError(f"Unable to read note {handle}: {exc}") from exc


def load_corpus(source: CorpusSource) -> list[Document]:
    """Materialize every document of the source, in listing order."""
    return [source.read(handle) for handle in source.list_documents()]
