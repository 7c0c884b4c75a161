"""Pull the JSON payload out of free-form model text."""
from __future__ import annotations

import json
import logging
from typing import Any

from spark.app.domain.errors import ModelResponseError
from spark.app.domain.models import Batch, ModelPayload, Single

logger = logging.getLogger(__name__)

_CLOSERS = {"[": "]", "{": "}"}


def find_balanced_region(text: str, opener: str) -> str | None:
    """
    Return the first bracketed region starting at `opener` whose brackets balance.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find(opener)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            depth += 1
        elif char in ("]", "}"):
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def extract_json(text: str, openers: tuple[str, ...]) -> Any:
    """Parse the first balanced region found, trying each opener in order."""
    if not isinstance(text, str) or not text:
        raise ModelResponseError("Model response did not include text content")

    for opener in openers:
        region = find_balanced_region(text, opener)
        if region is None:
            continue
        try:
            return json.loads(region)
        except json.JSONDecodeError as error:
            logger.error("Model response JSON did not parse: %s", error)
            raise ModelResponseError(f"Could not parse model response as JSON: {error}") from error

    raise ModelResponseError("Could not parse model response as JSON")


def to_payload(value: Any) -> ModelPayload:
    if isinstance(value, list):
        return Batch(values=value)
    if isinstance(value, dict):
        return Single(value=value)
    raise ModelResponseError(f"Model response JSON is neither an object nor an array: {type(value).__name__}")


def parse_model_payload(text: str, *, expect_batch: bool) -> ModelPayload:
    """
    Extract the model payload.

    Batch expectations look for an array first and fall back to an object.
    Single expectations look for an object first; inside `[{...}]` the first
    `{` is the object itself, so a one-element array still works.
    """
    openers = ("[", "{") if expect_batch else ("{", "[")
    return to_payload(extract_json(text, openers))


def payload_items(payload: ModelPayload) -> list[Any]:
    if isinstance(payload, Batch):
        return list(payload.values)
    return [payload.value]


def first_object(payload: ModelPayload) -> dict[str, Any]:
    if isinstance(payload, Single):
        return payload.value
    for item in payload.values:
        if isinstance(item, dict):
            return item
    raise ModelResponseError("Model response array did not contain an object")
