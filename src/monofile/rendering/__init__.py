"""Statistics and document rendering for ingested snapshots."""

from .context import build_context_input
from .flatten import flatten
from .models import ProcessingStats
from .stats import compute_stats

__all__ = ["ProcessingStats", "build_context_input", "compute_stats", "flatten"]
