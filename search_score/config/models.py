"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class Condition(BaseModel):
    """A single field-matching rule.

    A keyword is compared against the trimmed, lowercased value of ``name`` on
    the candidate record. An exact match awards ``equal``, otherwise a
    substring match awards ``include``. Unset or zero weights are never
    awarded.

    Example:
        >>> Condition(name="keywords", equal=50, include=10, array=True)
        >>> Condition(name="author", equal=100, prefix="@")
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Record field to inspect")
    equal: Optional[float] = Field(None, ge=0, description="Score for an exact match")
    include: Optional[float] = Field(None, ge=0, description="Score for a substring match")
    array: bool = Field(False, description="Field holds a sequence of strings")
    prefix: Optional[str] = Field(
        None, description="Keyword must start with this prefix to be eligible"
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from the field name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Condition name cannot be empty or whitespace-only")
        return stripped

    @property
    def is_weighted(self) -> bool:
        """True if the condition can ever contribute a non-zero score."""
        return bool(self.equal) or bool(self.include)


class SearchConfig(BaseModel):
    """Settings used by callers ranking a record collection."""

    min_score: float = Field(
        0.0, ge=0, description="Records must score strictly above this value to be listed"
    )
    limit: int = Field(0, ge=0, description="Maximum number of results (0 = unlimited)")
    case_sensitive: bool = Field(
        False, description="Keep keyword case when splitting a free-text query"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration: the condition table plus caller settings."""

    conditions: List[Condition] = Field(
        ..., min_length=1, description="Field-matching rules applied to every record"
    )
    search: SearchConfig = Field(default_factory=SearchConfig, description="Ranking settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

