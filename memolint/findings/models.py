# Pydantic data models for rule findings: Finding and Location.

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    """Where in the Ruby source a finding was reported (file, line, column)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)
    snippet: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}


class Finding(BaseModel):
    """
    A single offense reported by a rule, e.g. a memoized variable `@bar`
    inside method `foo`. One mismatch of the defined?-guard idiom produces
    three findings that share the same message.
    """

    rule_id: str
    message: str
    location: Location
    severity: str = Field(default="convention", description="e.g. convention, warning, error")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    def sort_key(self) -> tuple[str, int, int]:
        return (str(self.location.path), self.location.line, self.location.column)

    def format_line(self) -> str:
        """Render as `path:line:col: SEVERITY [rule] message`."""
        loc = self.location
        return f"{loc.path}:{loc.line}:{loc.column}: {self.severity.upper()} [{self.rule_id}] {self.message}"
