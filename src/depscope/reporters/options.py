"""Options shared by the report renderers."""

from pydantic import BaseModel, Field


class ReportOptions(BaseModel):
    """How a project report should be rendered."""

    dev: bool = False  # Include dev dependencies
    fix: bool = False  # Show alternative suggestions
    limit: int = Field(default=0, ge=0)  # Only the N worst dependencies (0 = all)
    quiet: bool = False  # Score and problems only
