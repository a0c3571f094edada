"""Pytest configuration and common fixtures."""

import copy
import logging

import pytest

SWAGGER_DOCUMENT = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "description": "Pets as a service", "version": "1.0.0"},
    "host": "petstore.example.com",
    "paths": {
        "/pets": {
            "parameters": [{"name": "X-Trace", "in": "header", "type": "string"}],
            "get": {
                "summary": "List",
                "tags": ["pets"],
                "parameters": [{"name": "limit", "in": "query", "type": "integer", "description": "Max items"}],
                "responses": {
                    "200": {
                        "description": "A list of pets",
                        "schema": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
                    }
                },
            },
            "post": {
                "summary": "Create a pet",
                "tags": ["pets"],
                "parameters": [
                    {"name": "body", "in": "body", "required": True, "schema": {"$ref": "#/definitions/NewPet"}}
                ],
                "responses": {"201": {"description": "Created", "schema": {"$ref": "#/definitions/Pet"}}},
            },
        },
        "/stores/{storeId}": {
            "get": {
                "summary": "Get store",
                "tags": ["stores"],
                "parameters": [{"name": "storeId", "in": "path", "required": True, "type": "string"}],
                "responses": {"200": {"description": "OK", "schema": {"$ref": "#/definitions/Store"}}},
            }
        },
        "/health": {"HEAD": {"responses": {"200": {"description": "Alive"}}}},
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "category": {"$ref": "#/definitions/Category"},
            },
        },
        "NewPet": {"type": "object", "properties": {"name": {"type": "string"}}},
        "Category": {"type": "object", "properties": {"name": {"type": "string"}}},
        "Store": {"type": "object", "properties": {"manager": {"$ref": "#/definitions/Employee"}}},
        "Employee": {"type": "object", "properties": {"store": {"$ref": "#/definitions/Store"}}},
        "Unused": {"type": "string"},
    },
}

OPENAPI_DOCUMENT = {
    "openapi": "3.0.3",
    "info": {"title": "Shop API", "version": "2.0"},
    "servers": [{"url": "https://shop.example.com"}],
    "paths": {
        "/orders": {
            "get": {
                "summary": "List orders",
                "tags": ["orders"],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Order"}}
                            }
                        },
                    }
                },
            },
            "post": {
                "summary": "Create order",
                "tags": ["orders"],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/NewOrder"}}},
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Order"}}},
                    },
                    "default": {"$ref": "#/components/responses/Error"},
                },
            },
        },
        "/orders/{orderId}": {
            "get": {
                "summary": "Get order",
                "tags": ["orders"],
                "parameters": [{"$ref": "#/components/parameters/OrderId"}],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Order"}}},
                    },
                    "404": {
                        "description": "Missing",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Missing"}}},
                    },
                },
            }
        },
        "/customers": {
            "get": {
                "summary": "List customers",
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Customer"}}},
                    }
                },
            }
        },
    },
    "components": {
        "schemas": {
            "Order": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "lines": {"type": "array", "items": {"$ref": "#/components/schemas/OrderLine"}},
                },
            },
            "OrderLine": {
                "type": "object",
                "properties": {"order": {"$ref": "#/components/schemas/Order"}, "sku": {"type": "string"}},
            },
            "NewOrder": {"type": "object", "properties": {"sku": {"type": "string"}}},
            "Customer": {"type": "object"},
            "Error": {"type": "object", "properties": {"message": {"type": "string"}}},
        },
        "parameters": {
            "OrderId": {
                "name": "orderId",
                "in": "path",
                "required": True,
                "description": "Order identifier",
                "schema": {"type": "string"},
            }
        },
        "responses": {
            "Error": {
                "description": "Unexpected error",
                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}},
            }
        },
        "securitySchemes": {"apiKey": {"type": "apiKey", "in": "header", "name": "X-Key"}},
    },
}


@pytest.fixture
def swagger_document():
    """Swagger 2.0 document with four operations (ids 0-3) and a Store/Employee reference cycle."""
    return copy.deepcopy(SWAGGER_DOCUMENT)


@pytest.fixture
def openapi_document():
    """OpenAPI 3 document with four operations (ids 0-3), an Order/OrderLine cycle and a dangling ref."""
    return copy.deepcopy(OPENAPI_DOCUMENT)


@pytest.fixture
def verbose_logger(request):
    """Get a logger that respects pytest verbosity."""
    logger = logging.getLogger(__name__)

    verbosity = request.config.getoption("verbose", default=0)

    if verbosity >= 3:
        logger.setLevel(logging.DEBUG)
    elif verbosity == 2:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)

    return logger


def assert_error_result(result, error_message=""):
    """Helper to assert tool error results."""
    assert result.startswith("Error: "), f"Expected an error result, got: {result[:200]}"
    assert error_message.lower() in result.lower()


def split_file_result(result):
    """Split an export tool result into its `[FILE]` header line and the content."""
    header, _, content = result.partition("\n")
    assert header.startswith("[FILE] "), f"Expected a [FILE] header, got: {header}"
    return header, content
