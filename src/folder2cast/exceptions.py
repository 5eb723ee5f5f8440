"""
Exceptions raised inside the package.

None of these escape the public entry points; they are converted into
degraded results where the failure happens.
"""


class Folder2CastError(Exception):
    """Base class for package errors."""


class CoverDownloadError(Folder2CastError):
    """Artwork could not be downloaded or written to the cache."""


class CoverDownloadTimeout(CoverDownloadError):
    """Artwork download exceeded its deadline and was aborted."""
