"""Flat document model shared by the indexers, the store and the query engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

if TYPE_CHECKING:
    from collections.abc import Sequence

# URL paths of the pages a result links to.
DIAGRAMS_PATH = "/diagrams"
DOCUMENTATION_PATH = "/documentation"
DECISIONS_PATH = "/decisions"


class DocumentType(enum.Enum):
    """Kind of record a document was flattened from."""

    WORKSPACE = "workspace"
    DIAGRAM = "diagram"
    DOCUMENTATION = "documentation"
    DECISION = "decision"

    @classmethod
    def parse(cls, value: str) -> DocumentType | None:
        """Case-insensitive lookup by value; ``None`` for unknown types."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class IndexedDocument:
    """One independently searchable record.

    ``content`` is only ever written to the index; it is never read back.
    """

    workspace_id: int
    type: DocumentType
    url: str = ""
    name: str = ""
    description: str = ""
    content: str = ""


@dataclass(frozen=True)
class SearchResult:
    """Stored fields of a matched document."""

    workspace_id: int
    url: str
    name: str
    description: str
    type: str

    def to_dict(self) -> dict[str, object]:
        return {
            "workspace_id": self.workspace_id,
            "url": self.url,
            "name": self.name,
            "description": self.description,
            "type": self.type,
        }


def append_all(*fragments: str | None) -> str:
    """Space-join the non-empty fragments."""
    return " ".join(f for f in fragments if f)


def url_encode(value: str) -> str:
    """Percent-encode *value* for use as a URL path segment or anchor."""
    return quote(value, safe="")


def owner_path(scope: Sequence[str]) -> str:
    """``/<system>[/<container>[/<component>]]`` with each name encoded.

    The workspace itself has an empty scope and an empty owner path.
    """
    return "".join("/" + url_encode(name) for name in scope)


def diagram_url(view_key: str) -> str:
    return f"{DIAGRAMS_PATH}#{view_key}"


def section_url(scope: Sequence[str], section_index: int) -> str:
    return f"{DOCUMENTATION_PATH}{owner_path(scope)}#{section_index}"


def decision_url(scope: Sequence[str], decision_id: str) -> str:
    return f"{DECISIONS_PATH}{owner_path(scope)}#{url_encode(decision_id)}"
