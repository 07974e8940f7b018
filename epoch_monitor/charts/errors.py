"""Custom exceptions for charts module."""


class ChartError(Exception):
    """Base exception for chart-related errors."""

    pass


class InvalidChartConfigError(ChartError):
    """
    Raised when chart configuration is invalid.

    This can happen when:
    - Width or height is not positive
    - Trailing opacities are not strictly decreasing
    - An opacity is outside (0, 1)
    - Fewer opacities than trailing epochs are configured
    """

    pass
