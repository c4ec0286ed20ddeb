"""
Validation Engine
=================
Post-parse summary of a fruit inventory.

After each parse, generates a report:
    - Total Fruits / Varieties
    - Fruits Without Varieties
    - Fruits With Zero Count
    - Duplicate Fruit Names
    - Anomaly breakdown by type

The report is informational; fatal problems have already aborted
the parse by the time it runs.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from .models import Anomaly, Fruit, ValidationReport

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Summarizes parsed fruits and their anomalies.
    """

    def validate(
        self,
        fruits: list[Fruit],
        anomalies: Optional[list[Anomaly]] = None,
    ) -> ValidationReport:
        """
        Build the report for one parse.

        Args:
            fruits: Parsed fruits, in document order.
            anomalies: Non-fatal anomalies recorded by the parser.

        Returns:
            ValidationReport with inventory totals and issue lists.
        """
        report = ValidationReport()
        anomalies = anomalies or []

        for anomaly in anomalies:
            key = anomaly.type.value
            report.anomaly_breakdown[key] = (
                report.anomaly_breakdown.get(key, 0) + 1
            )

        if not fruits:
            logger.warning("No fruits to validate")
            return report

        report.total_fruits = len(fruits)
        report.total_varieties = sum(len(f.varieties) for f in fruits)

        report.fruits_without_varieties = [
            f.name for f in fruits if not f.varieties
        ]
        report.fruits_with_zero_count = [
            f.name for f in fruits if f.count == 0
        ]

        name_counts = Counter(f.name for f in fruits)
        report.duplicate_names = sorted(
            name for name, count in name_counts.items() if count > 1
        )

        logger.info("=" * 60)
        logger.info("INVENTORY REPORT")
        logger.info("=" * 60)
        logger.info(f"Total Fruits: {report.total_fruits}")
        logger.info(f"Total Varieties: {report.total_varieties}")
        logger.info(
            f"Fruits Without Varieties: "
            f"{len(report.fruits_without_varieties)}"
        )
        logger.info(
            f"Fruits With Zero Count: {len(report.fruits_with_zero_count)}"
        )
        logger.info(f"Duplicate Fruit Names: {len(report.duplicate_names)}")

        if report.anomaly_breakdown:
            logger.info("Anomaly Breakdown:")
            for anomaly_type, count in sorted(
                report.anomaly_breakdown.items()
            ):
                logger.info(f"  • {anomaly_type}: {count}")

        logger.info("=" * 60)

        return report
