"""Configuration module for the Swagger Selector MCP server.

This module centralizes all environment variable handling and configuration
to make settings easily reusable across different modules.
"""

import os

# Document import
FETCH_TIMEOUT_SECONDS = float(os.getenv("SWAGGER_SELECTOR_FETCH_TIMEOUT_SECONDS") or 60)
PROXY_URL = os.getenv("SWAGGER_SELECTOR_PROXY_URL") or None  # Optional proxy for fetching remote documents

# Base filename used until a document is imported
DEFAULT_BASENAME = os.getenv("SWAGGER_SELECTOR_DEFAULT_BASENAME") or "swagger"
REMOTE_BASENAME = "remote-api"  # used when the document URL cannot be parsed

# When set, export tools also write the artifact into this directory
EXPORT_DIR = os.getenv("SWAGGER_SELECTOR_EXPORT_DIR") or None
