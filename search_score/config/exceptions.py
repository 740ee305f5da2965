"""Exceptions raised while loading scorer configuration."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when a configuration file, record file or environment is invalid.

    Carries the individual validation errors and suggestions for fixing them
    so the CLI can print a readable report.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.errors:
            parts.append("\nValidation Errors:")
            parts.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))
        if self.suggestions:
            parts.append("\nSuggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(parts)

    def __str__(self) -> str:
        return self._format_message()

