"""Errors raised while loading source maps for callsites.

Every failure carries the generated filename it was loading for, so callers
applying the strict policy can report which file broke the batch.
"""


class SourceMapError(Exception):
    """Base exception for source map loading failures."""

    def __init__(self, message: str, *, filename: str) -> None:
        """Initialize source map error.

        Args:
            message: Error message.
            filename: Generated source file the map was loaded for.

        """
        super().__init__(message)
        self.filename = filename


class SourceReadError(SourceMapError):
    """Raised when the generated source file itself cannot be read."""


class MapReadError(SourceMapError):
    """Raised when an externally referenced map file cannot be read."""

    def __init__(self, message: str, *, filename: str, map_path: str) -> None:
        """Initialize map read error.

        Args:
            message: Error message.
            filename: Generated source file referencing the map.
            map_path: Absolute path of the map file that failed to read.

        """
        super().__init__(message, filename=filename)
        self.map_path = map_path


class MapParseError(SourceMapError):
    """Raised when map content is not valid base64, JSON or a source map."""

    def __init__(self, message: str, *, filename: str, map_url: str) -> None:
        """Initialize map parse error.

        Args:
            message: Error message.
            filename: Generated source file referencing the map.
            map_url: Map path, or ``"<inline>"`` for data URIs.

        """
        super().__init__(message, filename=filename)
        self.map_url = map_url
