"""
Common pytest fixtures for the schema evolution test suite.

Provides shared fixtures for:
- Environment isolation (SCHEMA_EVOLUTION_* / LOG_* variables)
- Sample schema documents (user profile, order event)
- Compatible and breaking evolutions of those documents
"""

import copy
import pytest
from typing import Dict, Any


# ============================================
# Environment Setup
# ============================================

SETTINGS_ENV_VARS = (
    "SCHEMA_EVOLUTION_COMPATIBILITY",
    "SCHEMA_EVOLUTION_DRAFT",
    "SCHEMA_EVOLUTION_ALLOW_BREAKING",
    "SCHEMA_EVOLUTION_STRICT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Run every test against default settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


# ============================================
# Schema Fixtures
# ============================================

@pytest.fixture
def user_schema() -> Dict[str, Any]:
    """A registered user profile schema (version 1)."""
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "UserProfile",
        "type": "object",
        "properties": {
            "id": {"type": "integer", "minimum": 1},
            "name": {"type": "string", "minLength": 1, "maxLength": 100},
            "email": {"type": "string", "format": "email"},
            "status": {"type": "string", "enum": ["active", "inactive", "banned"]},
            "tags": {"type": "array", "items": {"type": "string"}, "maxItems": 10},
        },
        "required": ["id", "name"],
    }


@pytest.fixture
def user_schema_with_optional_field(user_schema) -> Dict[str, Any]:
    """Version 2: adds an optional nickname (safe in both directions)."""
    schema = copy.deepcopy(user_schema)
    schema["properties"]["nickname"] = {"type": "string"}
    return schema


@pytest.fixture
def user_schema_without_name(user_schema) -> Dict[str, Any]:
    """Version 2: drops the required name field (breaks backward compatibility)."""
    schema = copy.deepcopy(user_schema)
    del schema["properties"]["name"]
    schema["required"] = ["id"]
    return schema


@pytest.fixture
def user_schema_with_required_phone(user_schema) -> Dict[str, Any]:
    """Version 2: adds a required phone field (breaks forward compatibility)."""
    schema = copy.deepcopy(user_schema)
    schema["properties"]["phone"] = {"type": "string"}
    schema["required"] = ["id", "name", "phone"]
    return schema


@pytest.fixture
def order_schema() -> Dict[str, Any]:
    """An order event schema with five required fields."""
    return {
        "type": "object",
        "properties": {
            "order_id": {"type": "string"},
            "customer_id": {"type": "string"},
            "amount": {"type": "number", "minimum": 0},
            "currency": {"type": "string", "enum": ["USD", "EUR", "KRW"]},
            "created_at": {"type": "string", "format": "date-time"},
        },
        "required": ["order_id", "customer_id", "amount", "currency", "created_at"],
    }
