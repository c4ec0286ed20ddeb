"""
Emitter
=======
Writes a fruit list back out as YAML through PyYAML's event emitter,
using exactly the event vocabulary the state machine consumes.

Example output:

    ---
    fruit:
    - name: apple
      color: red
      count: 12
      varieties:
      - name: macintosh
        color: red
        seedless: false
    ...
"""

from __future__ import annotations

import logging
from typing import IO, Iterable, Iterator, Optional

import yaml

from .models import Fruit, Variety

logger = logging.getLogger(__name__)


SAMPLE_FRUITS: list[Fruit] = [
    Fruit(name="apple", color="red", count=12, varieties=[
        Variety(name="macintosh", color="red", seedless=False),
        Variety(name="granny smith", color="green", seedless=False),
        Variety(name="red delicious", color="red", seedless=False),
    ]),
    Fruit(name="orange", color="orange", count=3, varieties=[
        Variety(name="naval", color="orange", seedless=False),
        Variety(name="clementine", color="orange", seedless=True),
        Variety(name="valencia", color="orange", seedless=False),
    ]),
    Fruit(name="bannana", color="yellow", count=4, varieties=[
        Variety(name="cavendish", color="yellow", seedless=True),
        Variety(name="plantain", color="green", seedless=True),
    ]),
    Fruit(name="mango", color="green", count=1, varieties=[
        Variety(name="honey", color="yellow", seedless=False),
    ]),
]


def _scalar(value: str) -> yaml.ScalarEvent:
    return yaml.ScalarEvent(None, None, (True, True), value)


def _pair(key: str, value: str) -> Iterator[yaml.Event]:
    yield _scalar(key)
    yield _scalar(value)


def _variety_events(variety: Variety) -> Iterator[yaml.Event]:
    yield yaml.MappingStartEvent(None, None, True)
    yield from _pair("name", variety.name)
    yield from _pair("color", variety.color)
    yield from _pair("seedless", "true" if variety.seedless else "false")
    yield yaml.MappingEndEvent()


def _fruit_events(fruit: Fruit) -> Iterator[yaml.Event]:
    yield yaml.MappingStartEvent(None, None, True)
    yield from _pair("name", fruit.name)
    yield from _pair("color", fruit.color)
    yield from _pair("count", str(fruit.count))

    # An empty variety list is written as an absent key
    if fruit.varieties:
        yield _scalar("varieties")
        yield yaml.SequenceStartEvent(None, None, True)
        for variety in fruit.varieties:
            yield from _variety_events(variety)
        yield yaml.SequenceEndEvent()

    yield yaml.MappingEndEvent()


def fruit_events(fruits: Iterable[Fruit]) -> Iterator[yaml.Event]:
    """Yield the full event stream for a fruit list."""
    yield yaml.StreamStartEvent()
    yield yaml.DocumentStartEvent(explicit=True)
    yield yaml.MappingStartEvent(None, None, True)
    yield _scalar("fruit")
    yield yaml.SequenceStartEvent(None, None, True)
    for fruit in fruits:
        yield from _fruit_events(fruit)
    yield yaml.SequenceEndEvent()
    yield yaml.MappingEndEvent()
    yield yaml.DocumentEndEvent(explicit=True)
    yield yaml.StreamEndEvent()


def emit_fruits(
    fruits: Iterable[Fruit],
    stream: Optional[IO] = None,
) -> Optional[str]:
    """
    Serialize a fruit list as YAML.

    Args:
        fruits: Fruit records to write, in order.
        stream: Text stream to write to. If omitted, the YAML is returned.

    Returns:
        The YAML text when no stream is given, otherwise None.
    """
    fruits = list(fruits)
    logger.debug(f"Emitting {len(fruits)} fruits")
    return yaml.emit(fruit_events(fruits), stream, Dumper=yaml.SafeDumper)
