"""Decode raw feed payloads into :class:`Reading` objects."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from sensorfeed._redact import preview_payload
from sensorfeed.exceptions import DecodeError
from sensorfeed.models.reading import Reading


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; they are not JSON numbers.
    raise ValueError(f"non-standard JSON constant {name}")


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        problems.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(problems)


def decode_payload(raw: bytes | bytearray | str) -> dict[str, Any]:
    """Parse *raw* into a JSON object without validating its fields."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("Payload is not valid UTF-8", preview=preview_payload(raw)) from exc
    elif isinstance(raw, str):
        text = raw
    else:
        raise DecodeError(f"Unsupported payload type {type(raw).__name__}", preview=preview_payload(raw))

    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"Payload is not valid JSON: {exc}", preview=preview_payload(text)) from exc

    if not isinstance(parsed, dict):
        raise DecodeError(
            f"Payload is a JSON {type(parsed).__name__}, expected an object",
            preview=preview_payload(text),
        )
    return parsed


def decode(raw: bytes | bytearray | str) -> Reading:
    """Decode one feed message.

    Raises
    ------
    DecodeError
        For any structurally invalid payload: bad encoding, bad JSON, a
        non-object document, or missing/mistyped ``groupName``,
        ``temperature`` or ``humidity``. No other exception escapes.
    """
    parsed = decode_payload(raw)
    try:
        return Reading.model_validate(parsed)
    except ValidationError as exc:
        raise DecodeError(
            f"Payload is not a reading: {_describe_validation_error(exc)}",
            preview=preview_payload(raw),
        ) from exc
