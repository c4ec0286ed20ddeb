"""
Fruit Parser Engine
===================
Main orchestrator that combines the YAML event source, state machine
parsing, validation and output formatting into one pipeline.

Usage:
    engine = ParserEngine(config)
    result = engine.parse("path/to/fruit.yaml")
    # result is a ParseResult with structured JSON output

Architecture:
    YAML → yaml_events() → Events → StateMachineParser →
    Fruits → ValidationEngine → ParseResult (JSON)
"""

from __future__ import annotations

import io
import json
import logging
import os
import time
from contextlib import closing, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

import yaml

from . import __version__
from .events import yaml_events
from .models import ParseResult, ParseVersion
from .state_machine import StateMachineParser
from .validator import ValidationEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Log every state transition at DEBUG
    trace_events: bool = False

    # Output settings
    output_dir: Optional[str] = None


class ParserEngine:
    """
    Main fruit parsing engine.

    Orchestrates the full pipeline:
        1. Event extraction (PyYAML parser)
        2. State machine parsing (record reconstruction)
        3. Validation
        4. Output formatting

    Each parse uses a fresh StateMachineParser, so one engine may be
    reused for many documents.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.config = config or ParserConfig()
        self.log = log or logger
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        if self.config.trace_events:
            log_level = logging.DEBUG

        package_logger = logging.getLogger("fruit_parser")
        package_logger.setLevel(log_level)
        for handler in package_logger.handlers:
            handler.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)

        # File handler, one per path
        if self.config.log_file and not self._has_file_handler(
            package_logger, self.config.log_file
        ):
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(file_handler)

    @staticmethod
    def _has_file_handler(package_logger: logging.Logger, log_file: str) -> bool:
        path = os.path.abspath(log_file)
        return any(
            isinstance(h, logging.FileHandler) and h.baseFilename == path
            for h in package_logger.handlers
        )

    def parse_events(
        self,
        events: Iterable[yaml.Event],
        source: str = "<events>",
    ) -> ParseResult:
        """
        Drive a fresh state machine over an event source.

        Pulls one event at a time and stops as soon as the machine reaches
        STOP. The first failure from either the source or the machine
        aborts the parse; a generator source is closed either way.

        Args:
            events: Iterable of PyYAML events.
            source: Label recorded in the result.

        Returns:
            ParseResult with fruits, anomalies and validation report.

        Raises:
            MalformedInput: If the source cannot produce a valid event.
            UnexpectedEvent: If an event is invalid for the current state.
            InvalidBooleanLiteral: If a "seedless" value is not a boolean.
        """
        start_time = time.time()
        self.log.info(f"Starting parse of: {source}")

        machine = StateMachineParser(log=self.log)
        iterator: Iterator[yaml.Event] = iter(events)
        with closing(iterator) if hasattr(iterator, "close") else nullcontext():
            fruits = machine.parse(iterator)

        self.log.info("Validation")
        validation = ValidationEngine().validate(fruits, machine.anomalies)

        result = ParseResult(
            source=source,
            parse_version=ParseVersion(
                parser_version=__version__,
                event_count=machine.event_count,
                fruit_count=len(fruits),
            ),
            fruits=fruits,
            anomalies=machine.anomalies,
            validation=validation,
        )

        elapsed = time.time() - start_time
        self.log.info(
            f"Parse complete in {elapsed:.3f}s, "
            f"{len(fruits)} fruits extracted"
        )

        if self.config.output_dir:
            output_dir = Path(self.config.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            stem = Path(source).stem if not source.startswith("<") else "stream"
            self._save_json(result, output_dir / f"{stem}_parsed.json")

        return result

    def parse_stream(
        self,
        stream: IO,
        source: str = "<stream>",
    ) -> ParseResult:
        """Parse YAML from an open text or binary stream."""
        return self.parse_events(yaml_events(stream), source=source)

    def parse_string(self, text: str, source: str = "<string>") -> ParseResult:
        """Parse YAML from a string."""
        return self.parse_stream(io.StringIO(text), source=source)

    def parse(self, yaml_path: str) -> ParseResult:
        """
        Parse a YAML file into Fruit records.

        The file is read as bytes so the YAML reader detects its encoding
        and reports undecodable input as MalformedInput.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            MalformedInput: If the file is not valid YAML text.
        """
        yaml_path = os.path.abspath(yaml_path)

        if not os.path.exists(yaml_path):
            raise FileNotFoundError(f"YAML file not found: {yaml_path}")

        with open(yaml_path, "rb") as f:
            return self.parse_stream(f, source=yaml_path)

    def _save_json(self, result: ParseResult, filepath: Path):
        """Save ParseResult to JSON file."""
        try:
            data = result.model_dump()
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            self.log.info(f"Saved JSON output: {filepath}")
        except OSError as e:
            self.log.error(f"Failed to save JSON: {e}")
