"""
Domain exceptions for statistics app.

These exceptions represent invalid statistics requests, separate from
HTTP concerns.

Exception Hierarchy:
    StatisticsServiceError (base)
    └── InvalidPeriodError

Usage:
    from apps.statistics.exceptions import InvalidPeriodError

    if period not in Period.values:
        raise InvalidPeriodError(f"Invalid period: {period}")
"""


class StatisticsServiceError(Exception):
    """
    Base exception for all statistics errors.

        try:
            services = services_since(services, period='decade')
        except StatisticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(StatisticsServiceError):
    """
    Raised when a period name is not one of week, month, year, all.

    Example:
        raise InvalidPeriodError("Invalid period: 'decade'")
    """

    pass
