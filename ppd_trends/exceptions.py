"""Exception hierarchy for the PPD trends pipeline."""

from typing import Optional


class PipelineError(Exception):
    """Base exception for fatal pipeline errors."""
    pass


class IngestionError(PipelineError):
    """A source row could not be read or parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None, field: Optional[str] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.field = field


class EmptyInputError(PipelineError):
    """No records survived filtering, so there is no year to start from."""
    pass


class ConfigError(PipelineError):
    """Invalid configuration value."""
    pass
