"""Shared fixtures and event builders for the fruit parser tests."""

from __future__ import annotations

import logging

import pytest
import yaml


FRUIT_YAML = """\
---
fruit:
- name: apple
  color: red
  count: 12
  varieties:
  - name: macintosh
    seedless: false
  - name: granny smith
    seedless: false
- name: orange
  color: orange
  count: 3
...
"""


def scalar(value: str) -> yaml.ScalarEvent:
    return yaml.ScalarEvent(None, None, (True, False), value)


def mapping(*pairs: tuple) -> list:
    """Events for a flat mapping of scalar keys to scalar values."""
    events = [yaml.MappingStartEvent(None, None, True)]
    for key, value in pairs:
        events.append(scalar(key))
        if isinstance(value, list):
            events.extend(value)
        else:
            events.append(scalar(value))
    events.append(yaml.MappingEndEvent())
    return events


def sequence(*items: list) -> list:
    events = [yaml.SequenceStartEvent(None, None, True)]
    for item in items:
        events.extend(item)
    events.append(yaml.SequenceEndEvent())
    return events


def envelope(*fruit_objs: list) -> list:
    """Wrap fruit mappings in the stream/document/"fruit" list envelope."""
    return [
        yaml.StreamStartEvent(),
        yaml.DocumentStartEvent(explicit=True),
        yaml.MappingStartEvent(None, None, True),
        scalar("fruit"),
        *sequence(*fruit_objs),
        yaml.MappingEndEvent(),
        yaml.DocumentEndEvent(explicit=True),
        yaml.StreamEndEvent(),
    ]


@pytest.fixture
def fruit_yaml() -> str:
    return FRUIT_YAML


@pytest.fixture
def fruit_file(tmp_path):
    path = tmp_path / "fruit.yaml"
    path.write_text(FRUIT_YAML, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers ParserEngine attached so tests don't share them."""
    yield
    package_logger = logging.getLogger("fruit_parser")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
