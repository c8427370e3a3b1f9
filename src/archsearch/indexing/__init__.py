"""Indexing domain: flat document model and the workspace flatteners."""

from archsearch.indexing.decisions import decision_document, decision_documents
from archsearch.indexing.documents import (
    DECISIONS_PATH,
    DIAGRAMS_PATH,
    DOCUMENTATION_PATH,
    DocumentType,
    IndexedDocument,
    SearchResult,
)
from archsearch.indexing.flattener import (
    element_fragments,
    flatten_views,
    view_content,
    workspace_document,
)
from archsearch.indexing.pipeline import workspace_documents
from archsearch.indexing.sections import (
    DocumentationSection,
    documentation_documents,
    join_documentation,
    split_sections,
)

__all__ = [
    "DECISIONS_PATH",
    "DIAGRAMS_PATH",
    "DOCUMENTATION_PATH",
    "DocumentType",
    "DocumentationSection",
    "IndexedDocument",
    "SearchResult",
    "decision_document",
    "decision_documents",
    "documentation_documents",
    "element_fragments",
    "flatten_views",
    "join_documentation",
    "split_sections",
    "view_content",
    "workspace_document",
    "workspace_documents",
]
