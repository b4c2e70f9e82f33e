"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared schema fixtures used across unit and integration tests
"""

import copy

import pytest
from dotenv import load_dotenv

from schemaform.compiler import compile_schema

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Schema Constants
# =============================================================================

# Conditional on x: "xc" brings in a required z. The else branch only holds
# a nested conditional, which is never activated.
CONDITIONAL_SCHEMA = {
    "type": "object",
    "properties": {
        "x": {"type": "string"},
        "y": {"type": "string"},
    },
    "if": {"properties": {"x": {"const": "xc"}}},
    "then": {"properties": {"z": {"type": "string"}}, "required": ["z"]},
    "else": {
        "if": {"properties": {"x": {"const": "wc"}}},
        "then": {"properties": {"w": {"type": "string"}}, "required": ["y"]},
    },
}

PROFILE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "pattern": "^[A-Z][a-z]+$"},
        "nickname": {"type": "string", "default": "anon"},
        "age": {"type": "integer", "minimum": 1, "maximum": 130},
        "born": {"type": "string", "format": "date"},
        "newsletter": {"type": "boolean"},
        "legacy": {"type": "null"},
        "parent": {"$ref": "#"},
        "address": {
            "properties": {
                "street": {"type": "string"},
                "city": {"type": "string"},
            },
            "required": ["city"],
        },
        "tags": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["name"],
    "dependencies": {"newsletter": ["born"]},
}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def conditional_schema() -> dict:
    """Object schema with an if/then/else conditional on ``x``."""
    return copy.deepcopy(CONDITIONAL_SCHEMA)


@pytest.fixture
def profile_schema() -> dict:
    """Object schema exercising every builder kind."""
    return copy.deepcopy(PROFILE_SCHEMA)


@pytest.fixture
def conditional_form(conditional_schema):
    """Compiled form for ``conditional_schema``."""
    return compile_schema(conditional_schema)


@pytest.fixture
def profile_form(profile_schema):
    """Compiled form for ``profile_schema``."""
    return compile_schema(profile_schema)


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Mark tests under tests/integration as integration tests."""
    for item in items:
        if "integration" in item.nodeid.split("/") and not item.get_closest_marker(
            "integration"
        ):
            item.add_marker(pytest.mark.integration)
