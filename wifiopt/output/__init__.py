"""
WiFi Optimizer Output
======================

Console display and JSON report generation.
"""

from wifiopt.output.console import WifiOptConsoleOutput, sorted_by_signal
from wifiopt.output.report import WifiOptReportGenerator

__all__ = [
    "WifiOptConsoleOutput",
    "WifiOptReportGenerator",
    "sorted_by_signal",
]
