"""Remapping of raw backend output to canonical attribute keys.

Source expression grammar used in the DATA field of a mapping rule:

    expression := path ["->" processor]
    path       := segment ("|" segment)*

Each segment is a key into the raw output (or an index when the current
value is a list). A segment starting with "static:" is a literal: the rest
of the segment is the value and the walk stops there. The optional
processor is a named transform registered with register_processor().

Alternatives of a rule are tried in order; the first one yielding a value
wins. A value of None anywhere along the path counts as missing.
"""

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from extraction_bridge.schemas import MappingRule
from extraction_bridge.utils.datetime import to_timestamp

logger = logging.getLogger(__name__)

STATIC_PREFIX = "static:"
PATH_SEPARATOR = "|"
PROCESSOR_SEPARATOR = "->"

Processor = Callable[[Any], Any]


class UnknownProcessorError(KeyError):
    """Raised when a source expression names an unregistered processor."""


# Registry of named value transforms
_processors: dict[str, Processor] = {}


def register_processor(name: str, processor: Processor) -> None:
    """Register a value transform usable as "<path>-><name>".

    Args:
        name: Processor name referenced from mapping documents
        processor: Callable taking the resolved value, returning the new value
            (returning None or raising makes the alternative missing)
    """
    _processors[name] = processor
    logger.debug(f"Registered processor: {name}")


def get_processor(name: str) -> Processor:
    """Look up a registered processor by name."""
    try:
        return _processors[name]
    except KeyError:
        raise UnknownProcessorError(name) from None


def list_processors() -> list[str]:
    """List all registered processor names."""
    return sorted(_processors)


def resolve_path(data: Any, segments: Sequence[str]) -> Any:
    """Walk raw output along path segments.

    Returns:
        The value found, the literal of a static segment, or None
    """
    value = data
    for segment in segments:
        if segment.startswith(STATIC_PREFIX):
            return segment[len(STATIC_PREFIX):]

        if isinstance(value, Mapping):
            value = value.get(segment)
        elif isinstance(value, (list, tuple)) and segment.isdecimal():
            index = int(segment)
            value = value[index] if index < len(value) else None
        else:
            value = None

        if value is None:
            return None

    return value


def evaluate_expression(data: Any, expression: str) -> Any:
    """Evaluate one source expression against raw output.

    Raises:
        UnknownProcessorError: If the expression names an unregistered processor
    """
    path, separator, processor_name = expression.partition(PROCESSOR_SEPARATOR)
    processor = get_processor(processor_name.strip()) if separator else None

    value = resolve_path(data, path.split(PATH_SEPARATOR))
    if value is None or processor is None:
        return value

    try:
        return processor(value)
    except Exception as e:
        logger.debug(f"Processor {processor_name} rejected {value!r}: {e}")
        return None


def resolve_rule(data: Any, rule: MappingRule) -> Any:
    """Return the value of the first alternative of a rule that resolves."""
    for expression in rule.sources:
        value = evaluate_expression(data, expression)
        if value is not None:
            return value
    return None


def remap_output(data: Mapping[str, Any], mapping: Sequence[MappingRule]) -> dict[str, Any]:
    """Remap raw backend output to canonical attributes.

    Args:
        data: Raw output of one backend
        mapping: Rules of the backend's mapping document

    Returns:
        Canonical attribute set (rules that resolve to nothing are left out)
    """
    output: dict[str, Any] = {}

    for rule in mapping:
        try:
            value = resolve_rule(data, rule)
        except UnknownProcessorError as e:
            logger.warning(f"Skipping rule for {rule.target}: unknown processor {e}")
            continue

        if value is not None:
            output[rule.target] = value

    return output


# =============================================================================
# Built-in processors
# =============================================================================


def _to_int(value: Any) -> int:
    return int(float(value))


def _to_float(value: Any) -> float | None:
    result = float(value)
    return result if math.isfinite(result) else None


def _join(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


register_processor("timestamp", to_timestamp)
register_processor("lower", lambda value: str(value).lower())
register_processor("upper", lambda value: str(value).upper())
register_processor("strip", lambda value: str(value).strip())
register_processor("int", _to_int)
register_processor("float", _to_float)
register_processor("join", _join)
