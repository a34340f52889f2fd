"""Configuration models for Smart Crawler runs."""
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_USER_AGENT = "SmartCrawler/1.0 (contact: your-email@example.com)"
DEFAULT_OUTPUT_FILE = "output.md"


class RunMode(str, Enum):
    """Source a run ingests content from."""
    WEB = "web"
    REPO = "repo"
    DIRECTORY = "directory"


class CrawlOptions(BaseModel):
    """Options for breadth-first web crawling."""

    model_config = ConfigDict(extra="forbid")

    max_depth: int = Field(
        1,
        description="Maximum link depth followed from the seed URL",
        ge=0,
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request",
    )
    request_timeout: float = Field(
        15.0,
        description="Timeout for a single page fetch in seconds",
        gt=0,
    )
    request_delay: float = Field(
        0.05,
        description="Pause between consecutive fetches in seconds",
        ge=0,
    )


class WalkOptions(BaseModel):
    """Options for directory traversal."""

    model_config = ConfigDict(extra="forbid")

    include_dot_files: bool = Field(
        False,
        description="Whether entries starting with a dot are included (.gitignore always is)",
    )


class RunOptions(BaseModel):
    """Everything needed for one run of the tool."""

    model_config = ConfigDict(extra="forbid")

    url: Optional[str] = Field(None, description="Website to crawl")
    repo: Optional[str] = Field(None, description="Git repository URL (HTTPS or SSH) to clone")
    directory: Optional[Path] = Field(None, description="Local directory to process")
    branch: Optional[str] = Field(None, description="Branch to clone in repository mode")
    output: Path = Field(Path(DEFAULT_OUTPUT_FILE), description="Markdown file to write")
    crawl: CrawlOptions = Field(default_factory=CrawlOptions)
    walk: WalkOptions = Field(default_factory=WalkOptions)

    @model_validator(mode="after")
    def check_exclusive_sources(self) -> "RunOptions":
        """Ensure exactly one of url, repo or directory is provided."""
        provided = [
            name for name in ("url", "repo", "directory")
            if getattr(self, name) not in (None, "")
        ]
        if not provided:
            raise ValueError("One of url, repo or directory must be provided")
        if len(provided) > 1:
            raise ValueError(
                f"Only one of url, repo or directory can be provided, got {', '.join(provided)}"
            )
        return self

    @property
    def mode(self) -> RunMode:
        """Get the mode selected by the provided source."""
        if self.url:
            return RunMode.WEB
        if self.repo:
            return RunMode.REPO
        return RunMode.DIRECTORY
