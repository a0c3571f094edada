"""Selection session: the imported document, its catalog and the selected operations.

One session replaces any prior state wholesale on every import. Exports build
a fresh pruned document from the session each time; nothing is cached.
"""

from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from typing import Any, Iterable

from openapi_tools import (
    Dialect,
    ExportArtifact,
    Operation,
    build_catalog,
    detect_dialect,
    export_json,
    export_markdown,
    filter_operations,
    group_by_tag,
    prune,
)
from swagger_selector_mcp import config

logger = getLogger("SelectorSession")


class NoDocumentLoaded(RuntimeError):
    """Raised when an operation needs an imported document and there is none."""


@dataclass
class SelectorSession:
    """State of one user working on one imported document.

    Attributes:
        document: The imported document, None until the first import
        catalog: Operations of the document in discovery order
        selected_ids: Ids of selected operations
        basename: Base filename for exports
        dialect: Detected document dialect
    """

    document: dict[str, Any] | None = None
    catalog: list[Operation] = field(default_factory=list)
    selected_ids: set[int] = field(default_factory=set)
    basename: str = config.DEFAULT_BASENAME
    dialect: Dialect = Dialect.UNKNOWN

    @property
    def loaded(self) -> bool:
        return self.document is not None

    def load(self, document: Any, basename: str | None = None) -> list[Operation]:
        """Import a document, replacing the current one and clearing the selection.

        Raises:
            InvalidDocument: If the document has no `paths` object; the
                current state is left untouched in that case
        """
        catalog = build_catalog(document)

        self.document = document
        self.catalog = catalog
        self.selected_ids = set()
        self.basename = basename or config.DEFAULT_BASENAME
        self.dialect = detect_dialect(document)
        logger.info(
            "Loaded %s document '%s' with %d operations", self.dialect.value, self.basename, len(self.catalog)
        )
        return self.catalog

    def require_document(self) -> dict[str, Any]:
        if self.document is None:
            raise NoDocumentLoaded("No document loaded. Import a Swagger/OpenAPI document first.")
        return self.document

    def operations(self, query: str | None = None) -> list[Operation]:
        """Operations matching a filter query, in catalog order."""
        return filter_operations(self.catalog, query)

    def groups(self, query: str | None = None) -> dict[str, list[Operation]]:
        """Operations matching a filter query grouped by first tag."""
        return group_by_tag(self.operations(query))

    def select(self, ids: Iterable[int]) -> set[int]:
        """Add ids to the selection and return the ids that are not in the catalog."""
        ids = set(ids)
        unknown = ids - self._catalog_ids()
        self.selected_ids |= ids - unknown
        return unknown

    def deselect(self, ids: Iterable[int]) -> None:
        self.selected_ids -= set(ids)

    def reset_selection(self) -> None:
        self.selected_ids.clear()

    def _toggle(self, operations: list[Operation]) -> bool:
        """Select all given operations unless all are selected already, then deselect them.

        Returns:
            True if the operations ended up selected
        """
        ids = {op.id for op in operations}
        if ids and ids <= self.selected_ids:
            self.selected_ids -= ids
            return False
        self.selected_ids |= ids
        return True

    def toggle_all(self, query: str | None = None) -> bool:
        """Toggle every operation matching the filter query."""
        return self._toggle(self.operations(query))

    def toggle_group(self, tag: str, query: str | None = None) -> bool:
        """Toggle every operation of one tag group matching the filter query."""
        return self._toggle(self.groups(query).get(tag, []))

    def selected_operations(self) -> list[Operation]:
        return [op for op in self.catalog if op.id in self.selected_ids]

    def _catalog_ids(self) -> set[int]:
        return {op.id for op in self.catalog}

    def pruned_document(self) -> dict[str, Any]:
        """Build a fresh pruned document for the current selection."""
        return prune(self.require_document(), self.catalog, self.selected_ids)

    def export_json(self, now: datetime | None = None) -> ExportArtifact:
        return export_json(self.pruned_document(), self.basename, now)

    def export_markdown(self, now: datetime | None = None) -> ExportArtifact:
        return export_markdown(self.pruned_document(), self.basename, now)
