"""
State Machine Parser
====================
Deterministic state machine that rebuilds a fruit inventory from a flat,
ordered stream of YAML structural events.

Accepted event grammar:

    stream      := STREAM-START document* STREAM-END
    document    := DOCUMENT-START MAPPING-START "fruit" fruit-list
                   MAPPING-END DOCUMENT-END
    fruit-list  := SEQUENCE-START fruit-obj* SEQUENCE-END
    fruit-obj   := MAPPING-START fruit-data* MAPPING-END
    fruit-data  := "name" scalar | "color" scalar | "count" scalar
                 | "varieties" variety-list
    variety-list:= SEQUENCE-START variety-obj* SEQUENCE-END
    variety-obj := MAPPING-START variety-data* MAPPING-END
    variety-data:= "name" scalar | "color" scalar | "seedless" boolean

One event is consumed per call. The machine never looks ahead and never
recovers: any event that does not match a transition of the current
state raises UnexpectedEvent and leaves the state untouched.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Iterable, Optional

import yaml

from .errors import InvalidBooleanLiteral, MalformedInput, UnexpectedEvent
from .events import EventKind, event_kind
from .models import Anomaly, AnomalyType, Fruit, Variety

logger = logging.getLogger(__name__)

# ─── Scalar Decoding ──────────────────────────────────────────────────────────

TRUE_LITERALS = (
    "y", "Y", "yes", "Yes", "YES", "true", "True", "TRUE", "on", "On", "ON",
)
FALSE_LITERALS = (
    "n", "N", "no", "No", "NO", "false", "False", "FALSE", "off", "Off", "OFF",
)

# Leading integer as read by C atoi(): whitespace, optional sign, digits.
# ASCII only, so other Unicode digits and spaces stop the scan.
COUNT_PATTERN = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
STRICT_COUNT_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)


def decode_boolean(text: str) -> bool:
    """Decode a case-sensitive YAML 1.1 boolean literal."""
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    raise InvalidBooleanLiteral(text)


def parse_count(text: str) -> int:
    """
    Parse an integer the way atoi() does.

    Only the leading numeric prefix is read; text without one
    parses as 0 ("twelve" -> 0, "12 apples" -> 12).
    """
    match = COUNT_PATTERN.match(text)
    if not match:
        return 0
    return int(match.group(1))


# ─── States ───────────────────────────────────────────────────────────────────


class ParserState(Enum):
    """Parser states, grouped by nesting level."""
    START = "START"
    STREAM = "STREAM"
    DOCUMENT = "DOCUMENT"
    SECTION = "SECTION"

    FRUIT_LIST = "FRUIT_LIST"
    FRUIT_VALUES = "FRUIT_VALUES"
    FRUIT_KEY = "FRUIT_KEY"
    FRUIT_NAME = "FRUIT_NAME"
    FRUIT_COLOR = "FRUIT_COLOR"
    FRUIT_COUNT = "FRUIT_COUNT"

    VARIETY_LIST = "VARIETY_LIST"
    VARIETY_VALUES = "VARIETY_VALUES"
    VARIETY_KEY = "VARIETY_KEY"
    VARIETY_NAME = "VARIETY_NAME"
    VARIETY_COLOR = "VARIETY_COLOR"
    VARIETY_SEEDLESS = "VARIETY_SEEDLESS"

    STOP = "STOP"


S = ParserState
E = EventKind

# Transitions with no side effect on the accumulators
TRANSITIONS: dict[tuple[ParserState, EventKind], ParserState] = {
    (S.START, E.STREAM_START): S.STREAM,
    (S.STREAM, E.DOCUMENT_START): S.DOCUMENT,
    (S.STREAM, E.STREAM_END): S.STOP,
    (S.DOCUMENT, E.MAPPING_START): S.SECTION,
    (S.DOCUMENT, E.DOCUMENT_END): S.STREAM,
    (S.SECTION, E.DOCUMENT_END): S.STREAM,
    (S.FRUIT_LIST, E.SEQUENCE_START): S.FRUIT_VALUES,
    (S.FRUIT_LIST, E.MAPPING_END): S.SECTION,
    (S.FRUIT_VALUES, E.MAPPING_START): S.FRUIT_KEY,
    (S.FRUIT_VALUES, E.SEQUENCE_END): S.FRUIT_LIST,
    (S.VARIETY_LIST, E.SEQUENCE_START): S.VARIETY_VALUES,
    (S.VARIETY_VALUES, E.MAPPING_START): S.VARIETY_KEY,
}

# Key states: scalar key text -> value state
KEY_STATES: dict[ParserState, dict[str, ParserState]] = {
    S.SECTION: {
        "fruit": S.FRUIT_LIST,
    },
    S.FRUIT_KEY: {
        "name": S.FRUIT_NAME,
        "color": S.FRUIT_COLOR,
        "count": S.FRUIT_COUNT,
        "varieties": S.VARIETY_LIST,
    },
    S.VARIETY_KEY: {
        "name": S.VARIETY_NAME,
        "color": S.VARIETY_COLOR,
        "seedless": S.VARIETY_SEEDLESS,
    },
}

# Value states: (record, field, key state to return to)
FIELD_STATES: dict[ParserState, tuple[str, str, ParserState]] = {
    S.FRUIT_NAME: ("fruit", "name", S.FRUIT_KEY),
    S.FRUIT_COLOR: ("fruit", "color", S.FRUIT_KEY),
    S.FRUIT_COUNT: ("fruit", "count", S.FRUIT_KEY),
    S.VARIETY_NAME: ("variety", "name", S.VARIETY_KEY),
    S.VARIETY_COLOR: ("variety", "color", S.VARIETY_KEY),
    S.VARIETY_SEEDLESS: ("variety", "seedless", S.VARIETY_KEY),
}

DUPLICATE_FIELD_SEVERITY = 40
LENIENT_COUNT_SEVERITY = 30


class StateMachineParser:
    """
    Finite State Machine that transforms an ordered sequence of YAML
    events into Fruit records with their nested Variety records.

    One instance parses one event stream at a time and is not reentrant.
    Call reset() (or parse()) before reusing it.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.reset()

    def reset(self):
        """Reset the state machine for a fresh parsing run."""
        self.state = ParserState.START
        self.fruits: list[Fruit] = []
        self.anomalies: list[Anomaly] = []
        self.event_count = 0
        # Fields seen so far for the record in progress
        self._fruit: dict[str, Any] = {}
        self._variety: dict[str, Any] = {}
        # Varieties committed since the current "varieties" key opened
        self._varieties: list[Variety] = []
        # States to resume when a nested collection closes
        self._return_stack: list[ParserState] = []

    @property
    def done(self) -> bool:
        return self.state == ParserState.STOP

    def parse(self, events: Iterable[yaml.Event]) -> list[Fruit]:
        """
        Drive the machine over an event stream until STOP.

        Raises:
            UnexpectedEvent: On any event invalid for the current state.
            InvalidBooleanLiteral: On an unrecognized "seedless" value.
            MalformedInput: If the events run out before STOP.
        """
        self.reset()

        for event in events:
            self.consume_event(event)
            if self.done:
                break

        if not self.done:
            raise MalformedInput(
                f"Event stream ended in state {self.state.value}"
            )

        self.log.info(
            f"Parsed {len(self.fruits)} fruits from {self.event_count} events"
        )
        return self.fruits

    def consume_event(self, event: yaml.Event):
        """Consume exactly one event and advance the state."""
        kind = event_kind(event)
        self.log.debug(f"state={self.state.value} event={kind.value}")

        if self.state == ParserState.STOP:
            raise UnexpectedEvent(self.state, kind)

        next_state = TRANSITIONS.get((self.state, kind))
        if next_state is None:
            next_state = self._dispatch(kind, event)

        self.state = next_state
        self.event_count += 1

    # ─── Transitions with side effects ────────────────────────────────────

    def _dispatch(self, kind: EventKind, event: yaml.Event) -> ParserState:
        state = self.state

        if kind == EventKind.SCALAR and state in KEY_STATES:
            return self._route_key(event.value)

        if kind == EventKind.SCALAR and state in FIELD_STATES:
            record, field, key_state = FIELD_STATES[state]
            self._assign(record, field, self._decode(field, event.value))
            return key_state

        if kind == EventKind.MAPPING_END and state == ParserState.FRUIT_KEY:
            self._commit_fruit()
            return ParserState.FRUIT_VALUES

        if kind == EventKind.MAPPING_END and state == ParserState.VARIETY_KEY:
            self._commit_variety()
            return ParserState.VARIETY_VALUES

        if (
            kind == EventKind.SEQUENCE_END
            and state == ParserState.VARIETY_VALUES
            and self._return_stack
        ):
            return self._return_stack.pop()

        raise UnexpectedEvent(state, kind)

    def _route_key(self, key: str) -> ParserState:
        next_state = KEY_STATES[self.state].get(key)
        if next_state is None:
            raise UnexpectedEvent(self.state, EventKind.SCALAR, key)

        if next_state == ParserState.VARIETY_LIST:
            if "varieties" in self._fruit:
                self._warn_duplicate("fruit", "varieties")
            self._fruit["varieties"] = True
            self._varieties = []
            self._return_stack.append(self.state)

        return next_state

    def _decode(self, field: str, text: str) -> Any:
        if field == "seedless":
            return decode_boolean(text)
        if field == "count":
            count = parse_count(text)
            if not STRICT_COUNT_PATTERN.match(text):
                self.log.warning(
                    f"Non-numeric count '{text}' read as {count}"
                )
                self.anomalies.append(Anomaly(
                    type=AnomalyType.LENIENT_COUNT,
                    severity=LENIENT_COUNT_SEVERITY,
                    message=f"Count '{text}' is not an integer, read as {count}",
                    context={"text": text, "value": count,
                             "index": len(self.fruits)},
                ))
            return count
        return text

    def _assign(self, record: str, field: str, value: Any):
        scratch = self._fruit if record == "fruit" else self._variety
        if field in scratch:
            self._warn_duplicate(record, field)
        scratch[field] = value

    def _warn_duplicate(self, record: str, field: str):
        self.log.warning(f"Duplicate '{field}' key in {record}")
        self.anomalies.append(Anomaly(
            type=AnomalyType.DUPLICATE_FIELD,
            severity=DUPLICATE_FIELD_SEVERITY,
            message=f"Duplicate '{field}' key in {record}, last value wins",
            context={"record": record, "field": field,
                     "index": len(self.fruits)},
        ))

    def _commit_fruit(self):
        fields = {k: v for k, v in self._fruit.items() if k != "varieties"}
        fruit = Fruit(**fields, varieties=self._varieties)
        self.fruits.append(fruit)
        self.log.debug(
            f"Committed fruit '{fruit.name}' "
            f"with {len(fruit.varieties)} varieties"
        )
        self._fruit = {}
        self._varieties = []

    def _commit_variety(self):
        self._varieties.append(Variety(**self._variety))
        self._variety = {}
