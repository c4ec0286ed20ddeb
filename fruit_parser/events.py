"""
Event Source
============
Thin adapter over PyYAML's low-level event API.

The tokenizer itself is PyYAML's; this module only names the event kinds
the state machine understands, turns tokenizer failures into
MalformedInput, and provides the indented event listing used by the
``scan`` command.
"""

from __future__ import annotations

import logging
from contextlib import closing
from enum import Enum
from typing import IO, Iterable, Iterator, Union

import yaml

from .errors import MalformedInput

logger = logging.getLogger(__name__)

INDENT = "  "


class EventKind(str, Enum):
    """Structural event vocabulary produced by the tokenizer."""
    STREAM_START = "stream-start"
    STREAM_END = "stream-end"
    DOCUMENT_START = "document-start"
    DOCUMENT_END = "document-end"
    MAPPING_START = "mapping-start"
    MAPPING_END = "mapping-end"
    SEQUENCE_START = "sequence-start"
    SEQUENCE_END = "sequence-end"
    SCALAR = "scalar"
    ALIAS = "alias"


_EVENT_KINDS: dict[type, EventKind] = {
    yaml.StreamStartEvent: EventKind.STREAM_START,
    yaml.StreamEndEvent: EventKind.STREAM_END,
    yaml.DocumentStartEvent: EventKind.DOCUMENT_START,
    yaml.DocumentEndEvent: EventKind.DOCUMENT_END,
    yaml.MappingStartEvent: EventKind.MAPPING_START,
    yaml.MappingEndEvent: EventKind.MAPPING_END,
    yaml.SequenceStartEvent: EventKind.SEQUENCE_START,
    yaml.SequenceEndEvent: EventKind.SEQUENCE_END,
    yaml.ScalarEvent: EventKind.SCALAR,
    yaml.AliasEvent: EventKind.ALIAS,
}

# Kinds that open / close one indentation level in the scan listing
_OPENERS = {
    EventKind.STREAM_START,
    EventKind.DOCUMENT_START,
    EventKind.MAPPING_START,
    EventKind.SEQUENCE_START,
}
_CLOSERS = {
    EventKind.STREAM_END,
    EventKind.DOCUMENT_END,
    EventKind.MAPPING_END,
    EventKind.SEQUENCE_END,
}


def event_kind(event: yaml.Event) -> EventKind:
    """Return the kind of a PyYAML event."""
    try:
        return _EVENT_KINDS[type(event)]
    except KeyError:
        raise MalformedInput(
            f"Unknown event type: {type(event).__name__}"
        ) from None


def yaml_events(stream: Union[str, bytes, IO]) -> Iterator[yaml.Event]:
    """
    Pull structural events from a YAML text or file stream.

    Args:
        stream: YAML source text or an open file object.

    Yields:
        PyYAML events in document order.

    Raises:
        MalformedInput: If the tokenizer rejects the input or a text
            stream cannot be decoded.
    """
    with closing(yaml.parse(stream, Loader=yaml.SafeLoader)) as events:
        try:
            for event in events:
                yield event
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise MalformedInput(str(e)) from e


def describe_event(event: yaml.Event) -> str:
    """One-line description of an event for the scan listing."""
    kind = event_kind(event)
    if kind == EventKind.SCALAR:
        value = event.value or ""
        return f'{kind.value}-event = {{value="{value}", length={len(value)}}}'
    return f"{kind.value}-event"


def scan_events(events: Iterable[yaml.Event]) -> Iterator[tuple[int, str]]:
    """
    Walk an event stream and yield (depth, description) pairs.

    Collection and document starts are printed at the current depth and
    then open a level; their ends close the level before printing.
    """
    level = 0
    for event in events:
        kind = event_kind(event)
        if kind in _CLOSERS:
            level -= 1
            if level < 0:
                logger.warning("Indentation underflow at %s", kind.value)
                level = 0
        yield level, describe_event(event)
        if kind in _OPENERS:
            level += 1


def format_scan(events: Iterable[yaml.Event]) -> Iterator[str]:
    """Indented text lines for an event stream."""
    for depth, line in scan_events(events):
        yield INDENT * depth + line
