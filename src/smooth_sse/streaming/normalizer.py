"""
Payload normalizer for smoothed streaming.

Backends stream incremental text in several JSON layouts. Each layout is a
``PayloadShape``: a discriminator saying whether a payload uses that layout
and an extractor that rewrites the payload once per character of its new
text. Shapes are tried in order and the first discriminator that matches
owns the payload, even when it then finds no text.
"""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .events import NormalizedFragment


def _text(value: Any) -> Optional[str]:
    """Return ``value`` if it is a non-empty string."""
    if isinstance(value, str) and value:
        return value
    return None


def _delta_matches(payload: Dict[str, Any]) -> bool:
    return isinstance(payload.get("delta"), dict)


def _delta_fragments(payload: Dict[str, Any]) -> Iterator[NormalizedFragment]:
    delta = payload["delta"]
    text = _text(delta.get("text"))
    if text is None:
        return

    for char in text:
        yield NormalizedFragment({**payload, "delta": {**delta, "text": char}}, char)


def _candidates_matches(payload: Dict[str, Any]) -> bool:
    return isinstance(payload.get("candidates"), list)


def _candidates_fragments(payload: Dict[str, Any]) -> Iterator[NormalizedFragment]:
    candidates = payload["candidates"]
    for i, candidate in enumerate(candidates):
        if not isinstance(candidate, dict):
            continue
        text = _text(candidate.get("content"))
        if text is None:
            continue

        for char in text:
            clone = copy.deepcopy(candidates)
            clone[i]["content"] = char
            yield NormalizedFragment({**payload, "candidates": clone}, char)


def _top_level(key: str) -> Tuple[Callable, Callable]:
    """Discriminator and extractor for a plain top-level string field."""

    def matches(payload: Dict[str, Any]) -> bool:
        return _text(payload.get(key)) is not None

    def fragments(payload: Dict[str, Any]) -> Iterator[NormalizedFragment]:
        for char in payload[key]:
            yield NormalizedFragment({**payload, key: char}, char)

    return matches, fragments


# Searched in order inside the first choice.
CHOICE_TEXT_PATHS = (
    ("delta", "text"),
    ("delta", "content"),
    ("message", "content"),
    ("text",),
)


def _choices_matches(payload: Dict[str, Any]) -> bool:
    return isinstance(payload.get("choices"), list)


def _is_primary_choice(choice: Dict[str, Any]) -> bool:
    index = choice.get("index")
    return index is None or (index == 0 and not isinstance(index, bool))


def _choice_text(choice: Dict[str, Any]) -> Optional[Tuple[Tuple[str, ...], str]]:
    for path in CHOICE_TEXT_PATHS:
        node: Any = choice
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        text = _text(node)
        if text is not None:
            return path, text
    return None


def _choices_fragments(payload: Dict[str, Any]) -> Iterator[NormalizedFragment]:
    choices = payload["choices"]
    if not choices or not isinstance(choices[0], dict):
        return

    choice = choices[0]
    if not _is_primary_choice(choice):
        return

    found = _choice_text(choice)
    if found is None:
        return

    path, text = found
    for char in text:
        clone = copy.deepcopy(choice)
        target = clone
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = char
        yield NormalizedFragment({**payload, "choices": [clone]}, char)


@dataclass(frozen=True)
class PayloadShape:
    """One recognized backend response layout."""
    name: str
    matches: Callable[[Dict[str, Any]], bool]
    fragments: Callable[[Dict[str, Any]], Iterator[NormalizedFragment]]


SHAPES: Tuple[PayloadShape, ...] = (
    PayloadShape("delta", _delta_matches, _delta_fragments),
    PayloadShape("candidates", _candidates_matches, _candidates_fragments),
    PayloadShape("token", *_top_level("token")),
    PayloadShape("content", *_top_level("content")),
    PayloadShape("choices", _choices_matches, _choices_fragments),
)


def detect_shape(payload: Any) -> Optional[PayloadShape]:
    """
    Find the shape that owns a payload.

    Args:
        payload: Any value produced by ``json.loads``

    Returns:
        The first matching shape, or None
    """
    if not isinstance(payload, dict):
        return None

    for shape in SHAPES:
        if shape.matches(payload):
            return shape
    return None


def normalize_payload(payload: Any) -> Iterator[NormalizedFragment]:
    """
    Split the new text in a payload into single-character fragments.

    Args:
        payload: Any value produced by ``json.loads``

    Yields:
        One fragment per character, left to right. Nothing if the payload
        has no recognized shape or its text field is empty.
    """
    shape = detect_shape(payload)
    if shape is None:
        return iter(())
    return shape.fragments(payload)


__all__ = [
    'PayloadShape',
    'SHAPES',
    'CHOICE_TEXT_PATHS',
    'detect_shape',
    'normalize_payload',
]
