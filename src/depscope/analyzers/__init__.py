"""Analyzers for extracting, scoring and aggregating dependency signals."""

from depscope.analyzers.pipeline import AnalysisPipeline
from depscope.analyzers.scorer import Scorer

__all__ = ["AnalysisPipeline", "Scorer"]
