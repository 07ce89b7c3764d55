"""JSON Schemas for Pinning Service API payloads.

Schemas follow the components of the IPFS Pinning Service API OpenAPI
document and are validated with ``jsonschema``.
"""

from typing import Any

from jsonschema import Draft202012Validator

from .exceptions import SchemaNotFoundError

PIN_STATUSES = ("queued", "pinning", "pinned", "failed")

_PIN: dict[str, Any] = {
    "type": "object",
    "required": ["cid"],
    "properties": {
        "cid": {"type": "string"},
        "name": {"type": "string", "maxLength": 255},
        "origins": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
        "meta": {"type": "object", "additionalProperties": {"type": "string"}},
    },
}

_PIN_STATUS: dict[str, Any] = {
    "type": "object",
    "required": ["requestid", "status", "created", "pin", "delegates"],
    "properties": {
        "requestid": {"type": "string"},
        "status": {"enum": list(PIN_STATUSES)},
        "created": {"type": "string"},
        "pin": _PIN,
        "delegates": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "maxItems": 20,
            "uniqueItems": True,
        },
        "info": {"type": "object", "additionalProperties": {"type": "string"}},
    },
}

_SCHEMAS: dict[str, dict[str, Any]] = {
    "Pin": {"title": "Pin", **_PIN},
    "PinStatus": {"title": "PinStatus", **_PIN_STATUS},
    "PinResults": {
        "title": "PinResults",
        "type": "object",
        "required": ["count", "results"],
        "properties": {
            "count": {"type": "integer", "minimum": 0},
            "results": {
                "type": "array",
                "items": _PIN_STATUS,
                "minItems": 0,
                "maxItems": 1000,
                "uniqueItems": True,
            },
        },
    },
    "Failure": {
        "title": "Failure",
        "type": "object",
        "required": ["error"],
        "properties": {
            "error": {
                "type": "object",
                "required": ["reason"],
                "properties": {
                    "reason": {"type": "string"},
                    "details": {"type": "string"},
                },
            },
        },
    },
}


def schema_names() -> list[str]:
    """Names accepted by ``get_schema``."""
    return sorted(_SCHEMAS)


def get_schema(name: str) -> dict[str, Any]:
    """
    Get a payload schema by name.

    Args:
        name: Schema name, e.g. ``"Failure"`` or ``"PinStatus"``

    Raises:
        SchemaNotFoundError: If no schema has that name
    """
    try:
        return _SCHEMAS[name]
    except KeyError:
        raise SchemaNotFoundError(name) from None


def validation_errors(schema: dict[str, Any], instance: Any) -> list[str]:
    """
    Validate an instance against a schema.

    Returns:
        One message per violation, empty when the instance is valid
    """
    validator = Draft202012Validator(schema)
    messages = []
    for error in sorted(validator.iter_errors(instance), key=lambda e: e.json_path):
        location = "/".join(str(p) for p in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages
