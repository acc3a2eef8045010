"""Exceptions raised by the Mobsite build pipeline.

Two families exist. Enumeration errors are fatal and stop the build before
any content is produced. Content generation errors belong to a single asset
and are collected by the resolver alongside the other outcomes.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


class MobsiteError(Exception):
    """Base exception for all Mobsite errors."""


class EnumerationError(MobsiteError):
    """The list of assets to build could not be determined."""


class DuplicateAssetError(EnumerationError):
    """Two assets were declared with the same logical path.

    Attributes:
        path: The logical path declared more than once.
    """

    def __init__(self, path: PurePosixPath):
        self.path = path
        super().__init__(f"Asset declared more than once: {path}")


class DataSourceError(EnumerationError):
    """Records could not be fetched from the data source.

    Attributes:
        source_path: File or directory the failure relates to, if known.
        message: Human-readable error message.
    """

    def __init__(self, message: str, source_path: Path | None = None):
        self.source_path = source_path
        self.message = message
        prefix = f"{source_path}: " if source_path is not None else ""
        super().__init__(f"{prefix}{message}")


class ContentGenerationError(MobsiteError):
    """Producing the content of one asset failed.

    Attributes:
        path: Logical path of the asset whose content failed, when known.
        message: Human-readable error message.
    """

    def __init__(self, message: str, path: PurePosixPath | None = None):
        self.path = path
        self.message = message
        super().__init__(message)


class TableLookupError(ContentGenerationError, KeyError):
    """A path was looked up that no asset declared."""

    def __init__(self, missing: PurePosixPath, path: PurePosixPath | None = None):
        self.missing = missing
        super().__init__(f"No asset declared at {missing}", path)

    def __str__(self) -> str:
        return self.message


class BuildError(MobsiteError):
    """The build finished but the configured policy rejects its outcome.

    Attributes:
        failures: Mapping of logical path to the error that asset raised.
    """

    def __init__(self, failures: dict[PurePosixPath, ContentGenerationError]):
        self.failures = failures
        super().__init__(f"{len(failures)} asset(s) failed to build")


class ConfigError(MobsiteError):
    """A configuration value is invalid.

    Attributes:
        key: The offending configuration key.
        message: Human-readable error message.
    """

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"Invalid '{key}' setting: {message}")
