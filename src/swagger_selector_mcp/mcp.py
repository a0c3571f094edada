"""MCP server exposing operation selection and pruned export of Swagger/OpenAPI documents.

This module provides a FastMCP-based server class. The server imports one API
description at a time, lets the client select operations by id, and exports a
pruned document containing only those operations and the definitions they
reference, as JSON or as a Markdown report.
"""

import json
from logging import getLogger
from pathlib import Path
from typing import Annotated, Any, Optional

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import Tool
from mcp.types import ToolAnnotations
from pydantic import Field

from openapi_tools import ExportArtifact, Operation
from swagger_selector_mcp import config
from swagger_selector_mcp.client import DocumentClient, basename_from_url, load_document_file
from swagger_selector_mcp.common import normalise_ids
from swagger_selector_mcp.session import SelectorSession

READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=False, idempotentHint=True)
SELECTION = ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=False)
IMPORT_LOCAL = ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=False)
IMPORT_REMOTE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True)

# Key of the session used when a tool is called without an MCP request context
DEFAULT_SESSION_ID = "default"


def save_artifact(artifact: ExportArtifact, directory: str | Path) -> Path:
    """Write an export artifact into a directory and return its path."""
    target_dir = Path(directory).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / artifact.filename
    target.write_text(artifact.content, encoding="utf-8")
    return target


def _operation_entry(op: Operation, selected: bool) -> dict[str, Any]:
    return {
        "id": op.id,
        "method": op.method,
        "path": op.path,
        "summary": op.summary,
        "selected": selected,
    }


class SwaggerSelectorMCP(FastMCP):
    """MCP server for selecting operations of an API description and exporting a pruned context.

    Attributes:
        sessions: Selection sessions keyed by MCP session id, one per client connection
        export_dir: Directory exports are written to, None to only return them
        proxy_url: Optional proxy for fetching remote documents
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        export_dir: str | None = config.EXPORT_DIR,
        proxy_url: str | None = config.PROXY_URL,
        **settings: Any,
    ):
        self.logger = getLogger("SwaggerSelectorMCP")

        general_intro = """You are an API context assistant. You help users cut a large Swagger 2.0 or
        OpenAPI 3 description down to the few operations they care about, so that the result fits
        into a prompt or can be shared as a small, self-contained document.

        Workflow:
        1. Import a document with load_document_from_url or load_document_from_file
        2. Call list_operations (optionally with a filter query) to see operations grouped by tag
        3. Select operations by id with select_operations, toggle_tag_group or toggle_all_operations
        4. Export with export_markdown (best for LLM context) or export_json (valid API document)

        🚨 CRITICAL BEHAVIORAL RULES:

        🟢 **CALL IMMEDIATELY**:
        - list_operations, get_selection_summary, export_json, export_markdown

        🟡 **VERIFY PARAMETERS**:
        - select_operations, deselect_operations: only use ids returned by list_operations
        - Operation ids change whenever a new document is imported

        The exported document keeps every schema the selected operations reference,
        directly or through other schemas, and nothing else.
        """

        super().__init__(name=name or "Swagger Selector", instructions=general_intro, **settings)
        self.sessions: dict[str, SelectorSession] = {}
        self.export_dir = export_dir
        self.proxy_url = proxy_url

    def register_tools(self) -> None:
        """Register all available tools with the MCP server."""
        tool_functions = [
            (self.load_document_from_url, IMPORT_REMOTE),
            (self.load_document_from_file, IMPORT_LOCAL),
            (self.list_operations, READ_ONLY),
            (self.select_operations, SELECTION),
            (self.deselect_operations, SELECTION),
            (self.toggle_all_operations, SELECTION),
            (self.toggle_tag_group, SELECTION),
            (self.reset_selection, SELECTION),
            (self.get_selection_summary, READ_ONLY),
            (self.export_json, READ_ONLY),
            (self.export_markdown, READ_ONLY),
        ]

        for f, annotations in tool_functions:
            tool = Tool.from_function(f)
            tool.annotations = annotations
            description_str = f.__doc__ or ""
            tool.description = description_str
            tool.title = description_str.split("\n", 1)[0]
            self.add_tool(tool)

    def get_session(self, ctx: Context | None = None) -> SelectorSession:
        """Return the selection session of the calling client connection, creating it on first use.

        Each MCP connection gets its own document and selection, keyed by the
        FastMCP session id. Calls without a request context share one default session.
        """
        session_id = (ctx.session_id if ctx is not None else None) or DEFAULT_SESSION_ID
        session = self.sessions.get(session_id)
        if session is None:
            self.logger.debug("New selection session %s", session_id[:8])
            session = SelectorSession()
            self.sessions[session_id] = session
        return session

    @property
    def session(self) -> SelectorSession:
        """The default session used when tools are called without a request context."""
        return self.get_session()

    def _loaded_message(self, session: SelectorSession) -> str:
        groups = session.groups()
        return (
            f"Loaded {session.dialect.value} document '{session.basename}' with "
            f"{len(session.catalog)} operations in {len(groups)} tag groups: {', '.join(groups)}.\n"
            "[INSTRUCTION] Call list_operations to see the operation ids before selecting."
        )

    async def load_document_from_url(
        self,
        url: Annotated[str, Field(description="Absolute URL of a Swagger 2.0 / OpenAPI 3 JSON document")],
        ctx: Context | None = None,
    ) -> str:
        """Import a Swagger/OpenAPI JSON document from a URL.

        🟢 CALL IMMEDIATELY when the user gives a URL of an API description.

        Replaces any previously imported document and clears the selection.

        Returns:
            A summary of the imported document or an error message
        """
        session = self.get_session(ctx)
        try:
            async with DocumentClient(proxy_url=self.proxy_url) as client:
                document = await client.fetch_document(url)
            session.load(document, basename_from_url(url))
        # avoid crashing the server so we'll stick to the broad exception catch
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.logger.warning("Import from %s failed: %s", url, e)
            return f"Error: {str(e)}"
        return self._loaded_message(session)

    async def load_document_from_file(
        self,
        path: Annotated[str, Field(description="Path of a local Swagger 2.0 / OpenAPI 3 JSON file")],
        ctx: Context | None = None,
    ) -> str:
        """Import a Swagger/OpenAPI JSON document from a local file.

        🟢 CALL IMMEDIATELY when the user names a local API description file.

        Replaces any previously imported document and clears the selection.

        Returns:
            A summary of the imported document or an error message
        """
        session = self.get_session(ctx)
        try:
            document, basename = load_document_file(path)
            session.load(document, basename)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.logger.warning("Import from %s failed: %s", path, e)
            return f"Error: {str(e)}"
        return self._loaded_message(session)

    async def list_operations(
        self,
        query: Annotated[
            Optional[str],
            Field(description="Case-insensitive filter on path, summary or HTTP method"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """List operations of the imported document grouped by their first tag.

        🟢 CALL IMMEDIATELY - No information gathering required.

        Returns:
            JSON with the total and selected counts and, per tag group, the operations
            (id, method, path, summary, selected)
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"

        selected = session.selected_ids
        groups = []
        for tag, operations in session.groups(query).items():
            groups.append(
                {
                    "tag": tag,
                    "count": len(operations),
                    "all_selected": all(op.id in selected for op in operations),
                    "operations": [_operation_entry(op, op.id in selected) for op in operations],
                }
            )
        if not groups:
            return "No matching endpoints found."
        return json.dumps(
            {"total": len(session.catalog), "selected": len(selected), "groups": groups},
            ensure_ascii=False,
        )

    def _selection_status(self, session: SelectorSession) -> str:
        return f"{len(session.selected_ids)} of {len(session.catalog)} operations selected."

    async def select_operations(
        self,
        ids: Annotated[
            list[int | str] | int | str,
            Field(description="Operation ids from list_operations, as a list, a single id or a comma-separated string"),
        ],
        ctx: Context | None = None,
    ) -> str:
        """Add operations to the selection by id.

        🟡 VERIFY PARAMETERS - Only use ids returned by list_operations.

        Returns:
            The selection status
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            unknown = session.select(normalise_ids("ids", ids))
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
        status = self._selection_status(session)
        if unknown:
            status += f" Ignored unknown ids: {', '.join(str(i) for i in sorted(unknown))}."
        return status

    async def deselect_operations(
        self,
        ids: Annotated[
            list[int | str] | int | str,
            Field(description="Operation ids from list_operations, as a list, a single id or a comma-separated string"),
        ],
        ctx: Context | None = None,
    ) -> str:
        """Remove operations from the selection by id.

        Returns:
            The selection status
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            session.deselect(normalise_ids("ids", ids))
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
        return self._selection_status(session)

    async def toggle_all_operations(
        self,
        query: Annotated[
            Optional[str],
            Field(description="Case-insensitive filter on path, summary or HTTP method"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Select every operation matching the filter, or deselect them if all are selected already.

        Returns:
            The selection status
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            selected = session.toggle_all(query)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
        return f"{'Selected' if selected else 'Deselected'} matching operations. {self._selection_status(session)}"

    async def toggle_tag_group(
        self,
        tag: Annotated[str, Field(description="Tag group name from list_operations ('Default' for untagged)")],
        query: Annotated[
            Optional[str],
            Field(description="Case-insensitive filter on path, summary or HTTP method"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Select every operation of a tag group, or deselect them if all are selected already.

        Returns:
            The selection status
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            if tag not in session.groups(query):
                return f"Error: Unknown tag group '{tag}'."
            selected = session.toggle_group(tag, query)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
        return f"{'Selected' if selected else 'Deselected'} group '{tag}'. {self._selection_status(session)}"

    async def reset_selection(self, ctx: Context | None = None) -> str:
        """Clear the selection.

        Returns:
            The selection status
        """
        session = self.get_session(ctx)
        session.reset_selection()
        return self._selection_status(session)

    async def get_selection_summary(self, ctx: Context | None = None) -> str:
        """Show the currently selected operations.

        🟢 CALL IMMEDIATELY - No information gathering required.

        Returns:
            JSON with the document name and the selected operations
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
        return json.dumps(
            {
                "document": session.basename,
                "dialect": session.dialect.value,
                "total": len(session.catalog),
                "selected": [_operation_entry(op, True) for op in session.selected_operations()],
            },
            ensure_ascii=False,
        )

    def _hand_off(self, artifact: ExportArtifact) -> str:
        header = f"[FILE] {artifact.filename} ({artifact.mime_type})"
        if self.export_dir:
            target = save_artifact(artifact, self.export_dir)
            self.logger.info("Exported %s", target)
            header += f" saved to {target}"
        return f"{header}\n{artifact.content}"

    async def export_json(self, ctx: Context | None = None) -> str:
        """Export the selected operations and their referenced schemas as a JSON API document.

        🟢 CALL IMMEDIATELY once operations are selected.

        Returns:
            The file name line followed by the pruned Swagger/OpenAPI JSON document
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            if not session.selected_ids:
                return "Error: No operations selected. Use select_operations first."
            return self._hand_off(session.export_json())
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"

    async def export_markdown(self, ctx: Context | None = None) -> str:
        """Export the selected operations and their referenced schemas as a Markdown report.

        🟢 CALL IMMEDIATELY once operations are selected.

        The report lists endpoints with parameters, request bodies and responses,
        followed by the data models. It is the best format to give an LLM API context.

        Returns:
            The file name line followed by the Markdown report
        """
        session = self.get_session(ctx)
        try:
            session.require_document()
            if not session.selected_ids:
                return "Error: No operations selected. Use select_operations first."
            return self._hand_off(session.export_markdown())
        except Exception as e:  # pylint: disable=broad-exception-caught
            return f"Error: {str(e)}"
