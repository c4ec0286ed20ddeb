"""Exception hierarchy for fatal parse conditions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .events import EventKind
    from .state_machine import ParserState


class FruitParserError(Exception):
    """Base exception for fruit parser errors."""
    pass


class MalformedInput(FruitParserError):
    """Raised when the event source cannot produce a well-formed event."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnexpectedEvent(FruitParserError):
    """Raised when an event is not valid for the current parser state."""

    def __init__(
        self,
        state: ParserState,
        event_kind: EventKind,
        value: Optional[str] = None,
    ):
        self.state = state
        self.event_kind = event_kind
        self.value = value
        if value is not None:
            message = (
                f"Unexpected {event_kind.value} '{value}' "
                f"in state {state.value}"
            )
        else:
            message = f"Unexpected {event_kind.value} in state {state.value}"
        super().__init__(message)


class InvalidBooleanLiteral(FruitParserError, ValueError):
    """Raised when a boolean scalar is not a recognized literal."""

    def __init__(self, text: str):
        super().__init__(f"Invalid boolean string value: {text}")
        self.text = text
