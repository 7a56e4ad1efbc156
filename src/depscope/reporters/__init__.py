"""Report renderers."""

from depscope.reporters.options import ReportOptions

__all__ = ["ReportOptions"]
