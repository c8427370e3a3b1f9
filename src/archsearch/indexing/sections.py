"""Documentation section splitter.

Documentation blocks are joined into one text and re-split on level-2
headings (``## `` Markdown or ``== `` AsciiDoc).  Each section becomes one
documentation document whose URL anchor is the section's ordinal, so the
ordinal has to stay stable: the preamble before the first heading is always
section 0, even when it is empty and therefore not emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from archsearch.indexing.documents import (
    DocumentType,
    IndexedDocument,
    append_all,
    section_url,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from archsearch.model.workspace import Documentation, Element, Workspace

MARKDOWN_SECTION_HEADING = "## "
ASCIIDOC_SECTION_HEADING = "== "
_HEADING_MARKERS = (MARKDOWN_SECTION_HEADING, ASCIIDOC_SECTION_HEADING)

NEWLINE = "\n"


@dataclass(frozen=True)
class DocumentationSection:
    """A heading-delimited slice of documentation text."""

    title: str
    content: str
    index: int


def join_documentation(documentation: Documentation) -> str:
    """Concatenate all section blocks, each followed by a newline."""
    return "".join(section.content + NEWLINE for section in documentation.sections)


def _heading_title(line: str) -> str | None:
    for marker in _HEADING_MARKERS:
        if line.startswith(marker):
            return line[len(marker):].strip()
    return None


def _lines(text: str) -> list[str]:
    # Trailing empty lines carry nothing; dropping them keeps the last
    # section's content identical to what was written.
    lines = text.split(NEWLINE)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def split_sections(text: str) -> list[DocumentationSection]:
    """Split *text* into sections on heading lines.

    A preamble with no title and only whitespace is skipped, but still
    counts as section 0.
    """
    sections: list[DocumentationSection] = []
    title = ""
    content: list[str] = []
    index = 0

    def flush() -> None:
        body = "".join(content)
        if index == 0 and not title and not body.strip():
            return
        sections.append(DocumentationSection(title=title, content=body, index=index))

    for line in _lines(text):
        heading = _heading_title(line)
        if heading is None:
            content.append(line + NEWLINE)
            continue
        flush()
        title = heading
        content = []
        index += 1

    if content:
        flush()
    return sections


def section_name(owner_name: str, title: str) -> str:
    if title:
        return f"{owner_name} - {title}"
    return owner_name


def section_document(
    workspace: Workspace,
    element: Element | None,
    section: DocumentationSection,
    *,
    scope: Sequence[str] | None = None,
) -> IndexedDocument:
    owner_name = workspace.name if element is None else element.name
    if scope is None:
        scope = () if element is None else (element.name,)
    return IndexedDocument(
        workspace_id=workspace.id,
        type=DocumentType.DOCUMENTATION,
        url=section_url(scope, section.index),
        name=section_name(owner_name, section.title),
        description="",
        content=append_all(section.title, section.content),
    )


def documentation_documents(
    workspace: Workspace,
    element: Element | None,
    documentation: Documentation,
    *,
    scope: Sequence[str] | None = None,
) -> Iterator[IndexedDocument]:
    """Documentation documents for the workspace (``element=None``) or an element.

    *scope* is the containment path of names that identifies the owning
    element in the URL; it defaults to the element's own name.
    """
    for section in split_sections(join_documentation(documentation)):
        yield section_document(workspace, element, section, scope=scope)
