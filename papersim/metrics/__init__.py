"""
Reporting for PaperSim.

This module provides:
- Log lines describing every processed trade batch
- In-memory recording of session events with CSV/Parquet export
"""

from .reporter import CompositeReporter, LogReporter, NullReporter, RecordingReporter, Reporter

__all__ = [
    'Reporter', 'NullReporter', 'LogReporter', 'RecordingReporter', 'CompositeReporter',
]
