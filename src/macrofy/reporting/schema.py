"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

DIAGNOSTIC_SCHEMA = {
    "type": "object",
    "required": ["id", "message", "severity", "line", "column"],
    "properties": {
        "id": {"type": "string"},
        "message": {"type": "string"},
        "severity": {"type": "string", "enum": ["error"]},
        "attribute": {"type": ["string", "null"]},
        "line": {"type": "integer", "minimum": 0},
        "column": {"type": "integer", "minimum": 0},
    },
}

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "macrofy report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "sources"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "changed", "expanded", "generated", "diagnostics"],
            "properties": {
                "total": {"type": "integer"},
                "changed": {"type": "integer"},
                "expanded": {"type": "integer"},
                "generated": {"type": "integer"},
                "diagnostics": {"type": "integer"},
            },
        },
        "sources": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["path", "ok", "changed", "expanded", "configs", "diagnostics"],
                "properties": {
                    "path": {"type": "string"},
                    "ok": {"type": "boolean"},
                    "changed": {"type": "boolean"},
                    "expanded": {"type": "integer"},
                    "configs": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name", "wrapper", "facts"],
                            "properties": {
                                "name": {"type": "string"},
                                "wrapper": {"type": "string"},
                                "facts": {"type": "object"},
                            },
                        },
                    },
                    "diagnostics": {"type": "array", "items": DIAGNOSTIC_SCHEMA},
                },
            },
        },
    },
}
