"""Response envelope for machine-readable JSON output."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class CommandResponse:
    """Standardized response envelope for CLI commands run with --json.

    Scripts parse success, data and errors; human_summary carries the
    same one-line text the alert would show.
    """

    success: bool
    command: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    human_summary: str = ""
    schema_version: str = "1.0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "command": self.command,
            "data": self.data,
            "errors": self.errors,
            "human_summary": self.human_summary,
            "timestamp": datetime.now().isoformat(),
            "schema_version": self.schema_version,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)


def create_response(
    command: str,
    success: bool = True,
    data: Optional[dict[str, Any]] = None,
    errors: Optional[list[str]] = None,
    human_summary: str = "",
) -> CommandResponse:
    """Create a CommandResponse with defaults.

    Args:
        command: The command that was executed
        success: Whether the command succeeded
        data: Command-specific result data
        errors: Error messages
        human_summary: One-line description for humans

    Returns:
        CommandResponse instance
    """
    return CommandResponse(
        success=success,
        command=command,
        data=data or {},
        errors=errors or [],
        human_summary=human_summary,
    )
