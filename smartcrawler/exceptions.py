"""Exceptions that abort a Smart Crawler run."""


class SmartCrawlerError(Exception):
    """Base class for fatal, run-aborting errors."""


class InvalidSeedUrlError(SmartCrawlerError):
    """The seed URL of a web crawl could not be parsed or is not HTTP(S)."""


class InvalidDirectoryError(SmartCrawlerError):
    """The directory to process does not exist or is not a directory."""


class CloneError(SmartCrawlerError):
    """Cloning a remote repository failed."""
