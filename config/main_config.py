"""Main Config model."""

from pydantic import BaseModel, Field

from core.constants import DEFAULT_AUTOSAVE_DELAY, DEFAULT_CHARS_PER_LINE, DEFAULT_LINES_PER_PAGE

from .defaults import DEFAULT_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT


class PaginatorConfig(BaseModel):
    """Page size used by the two-column book view."""

    lines_per_page: int = Field(
        default=DEFAULT_LINES_PER_PAGE,
        ge=1,
        description="Estimated lines that fit on one page",
    )
    chars_per_line: int = Field(
        default=DEFAULT_CHARS_PER_LINE,
        ge=1,
        description="Characters that fit on one rendered line",
    )


class Config(BaseModel):
    """Main configuration model."""

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the chat application's HTTP API",
    )
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description="Timeout for API requests in seconds",
    )
    autosave_delay: float = Field(
        default=DEFAULT_AUTOSAVE_DELAY,
        ge=0,
        description="Quiet period before an edited document is saved, in seconds",
    )
    paginator: PaginatorConfig = Field(
        default_factory=PaginatorConfig,
        description="Book pagination settings",
    )
    features: dict[str, bool] = Field(
        default_factory=dict,
        description="Feature flag overrides by name",
    )
