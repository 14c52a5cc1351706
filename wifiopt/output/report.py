"""
WiFi Optimizer Report Generator
================================

Writes an evaluation result as a structured JSON document. The
embedded ``snapshot`` can be fed back to ``--snapshot`` to reproduce
the analysis.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from shared.logger import WifiOptLogger

from wifiopt import __version__
from wifiopt.core.models import EvaluationResult

logger = WifiOptLogger("output.report")


class WifiOptReportGenerator:
    """Generate JSON reports from evaluation results.

    Args:
        indent: JSON indentation; ``0`` writes compact output.
        include_channel_scores: Include per-candidate channel scores.
    """

    def __init__(self, indent: int = 2, include_channel_scores: bool = True) -> None:
        self._indent = indent
        self._include_channel_scores = include_channel_scores

    def build(self, result: EvaluationResult) -> dict[str, Any]:
        """Return the report as a JSON-compatible dictionary."""
        analysis = result.analysis
        report_data: dict[str, Any] = {
            "tool": "wifiopt",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "networks": len(result.snapshot.networks),
                "associated": result.current_network is not None,
                "performance_score": analysis.performance_score,
                "signal_quality": analysis.signal_quality.value,
                "interference_factors": len(analysis.interference_factors),
                "recommendations": len(analysis.recommendations),
                "critical": analysis.has_critical_factor,
            },
            "snapshot": result.snapshot.model_dump(mode="json"),
            "current_network": (
                result.current_network.model_dump(mode="json")
                if result.current_network is not None
                else None
            ),
            "channel_recommendation": result.recommendation.model_dump(mode="json"),
            "analysis": analysis.model_dump(mode="json"),
        }

        if self._include_channel_scores:
            report_data["channel_scores"] = {
                band.value: [s.model_dump(mode="json") for s in scores]
                for band, scores in result.channel_scores.items()
            }

        return report_data

    def generate_json(self, result: EvaluationResult, output_path: str | Path) -> str:
        """Write the JSON report to *output_path*.

        Returns:
            Absolute path to the generated report.

        Raises:
            OSError: If the file cannot be written.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.build(result), indent=self._indent or None, ensure_ascii=False),
            encoding="utf-8",
        )

        logger.info("JSON report generated", path=str(path))
        return str(path.resolve())
