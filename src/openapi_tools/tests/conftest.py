"""
Conftest for openapi_tools tests - re-exports fixtures from top-level tests.
"""

# Import directly from tests since pytest now knows where to find packages
from tests.conftest import (
    openapi_document,
    swagger_document,
    verbose_logger,
)

# Make the fixtures available for import
__all__ = [
    "openapi_document",
    "swagger_document",
    "verbose_logger",
]
