"""
Conftest for swagger_selector_mcp tests - re-exports generic fixtures and
adds a SwaggerSelectorMCP-specific fixture for unit tests.
"""

import pytest

from swagger_selector_mcp.mcp import SwaggerSelectorMCP

# Import directly from tests since pytest now knows where to find packages
from tests.conftest import (  # pylint: disable=import-error
    openapi_document,
    swagger_document,
    verbose_logger,
)


@pytest.fixture
def selector_mcp_server() -> SwaggerSelectorMCP:
    """Return a fresh SwaggerSelectorMCP instance with tools registered and no export directory.

    Tests call the tool methods directly without going through the MCP transport.
    """
    server = SwaggerSelectorMCP(export_dir=None, proxy_url=None)
    server.register_tools()
    return server


@pytest.fixture
def loaded_mcp_server(selector_mcp_server, openapi_document):  # pylint: disable=redefined-outer-name
    """SwaggerSelectorMCP with the OpenAPI 3 test document imported as 'shop'."""
    selector_mcp_server.session.load(openapi_document, "shop")
    return selector_mcp_server


# Make the fixtures available for import
__all__ = [
    "loaded_mcp_server",
    "openapi_document",
    "selector_mcp_server",
    "swagger_document",
    "verbose_logger",
]
