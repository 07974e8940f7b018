"""Custom exceptions for snapshot module."""


class SnapshotError(Exception):
    """Base exception for snapshot-related errors."""

    pass


class SnapshotRequestError(SnapshotError):
    """
    Raised when fetching a snapshot fails at the transport level.

    This can happen when:
    - Connection error or timeout
    - HTTP error status
    - Response body is not valid JSON
    - Snapshot file cannot be read or decoded
    """

    pass


class SnapshotUpstreamError(SnapshotError):
    """
    Raised when the scan endpoint reports that it produced no snapshot.

    This can happen when:
    - The scan process exited with an error (success: false)
    - The scan process wrote no result file
    """

    def __init__(self, message: str, command_failed: bool = False):
        """
        Initialize SnapshotUpstreamError.

        Args:
            message: Error message reported by the endpoint
            command_failed: Whether the endpoint flagged the scan command itself as failed
        """
        super().__init__(message)
        self.command_failed = command_failed


class SnapshotNotFoundError(SnapshotError):
    """
    Raised when no snapshot file exists at the configured path.

    This can happen when:
    - Path does not exist
    - Directory contains no *.meta.json file
    """

    pass
