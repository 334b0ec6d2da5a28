"""
Domain exceptions for preferences app.

Exception Hierarchy:
    PreferencesServiceError (base)
    ├── InvalidPreferenceError
    ├── RecurringServiceError
    │   └── RecurringServiceNotFoundError
    └── TemplateError
        └── TemplateNotFoundError

Usage:
    from apps.preferences.services.exceptions import InvalidPreferenceError

    if currency not in AVAILABLE_CURRENCIES:
        raise InvalidPreferenceError(f"Unsupported currency: {currency}")
"""


class PreferencesServiceError(Exception):
    """
    Base exception for all preferences service errors.

        try:
            save_app_settings(currency='XXX')
        except PreferencesServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPreferenceError(PreferencesServiceError):
    """
    Raised when a preference value is out of its allowed set or range.

    Example:
        raise InvalidPreferenceError("Rating must be between 1 and 5")
    """

    pass


class RecurringServiceError(PreferencesServiceError):
    """
    Raised when a recurring service is missing or cannot produce an entry.

    Example:
        raise RecurringServiceError("Recurring service not found")
    """

    pass


class TemplateError(PreferencesServiceError):
    """
    Raised when a service template is missing or invalid.

    Example:
        raise TemplateError("Template not found")
    """

    pass


class RecurringServiceNotFoundError(RecurringServiceError):
    pass


class TemplateNotFoundError(TemplateError):
    pass
