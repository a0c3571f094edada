"""Swagger Selector MCP server: pick operations from an API description and export a pruned context."""

import os
from importlib.metadata import PackageNotFoundError, version

# Try to get version from package metadata
try:
    __version__ = version("swagger-selector-mcp")
except PackageNotFoundError:
    # Running in development or from source
    __version__ = "0.0.0-dev"

# Allow environment variable override for container builds
__version__ = os.environ.get("SWAGGER_SELECTOR_MCP_VERSION", __version__)
