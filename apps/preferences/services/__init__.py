"""Services for preferences business logic."""

from .exceptions import (
    PreferencesServiceError,
    InvalidPreferenceError,
    RecurringServiceError,
    RecurringServiceNotFoundError,
    TemplateError,
    TemplateNotFoundError,
)
from .store import (
    get_preference,
    set_preference,
    delete_preference,
)
from .app_settings import (
    AppSettings,
    load_app_settings,
    save_app_settings,
    AVAILABLE_CURRENCIES,
    THEME_IDS,
)
from .budgets import (
    load_budgets,
    set_budget,
    remove_budget,
)
from .ratings import (
    load_provider_ratings,
    rate_provider,
    DEFAULT_RATING,
)
from .recurring import (
    Frequency,
    next_due,
    load_recurring_services,
    get_recurring_service,
    create_recurring_service,
    update_recurring_service,
    delete_recurring_service,
    add_service_from_recurring,
)
from .templates import (
    load_templates,
    get_template,
    create_template,
    update_template,
    delete_template,
    add_service_from_template,
)

__all__ = [
    # Exceptions
    'PreferencesServiceError',
    'InvalidPreferenceError',
    'RecurringServiceError',
    'RecurringServiceNotFoundError',
    'TemplateError',
    'TemplateNotFoundError',
    # Store
    'get_preference',
    'set_preference',
    'delete_preference',
    # App Settings
    'AppSettings',
    'load_app_settings',
    'save_app_settings',
    'AVAILABLE_CURRENCIES',
    'THEME_IDS',
    # Budgets
    'load_budgets',
    'set_budget',
    'remove_budget',
    # Provider Ratings
    'load_provider_ratings',
    'rate_provider',
    'DEFAULT_RATING',
    # Recurring Services
    'Frequency',
    'next_due',
    'load_recurring_services',
    'get_recurring_service',
    'create_recurring_service',
    'update_recurring_service',
    'delete_recurring_service',
    'add_service_from_recurring',
    # Templates
    'load_templates',
    'get_template',
    'create_template',
    'update_template',
    'delete_template',
    'add_service_from_template',
]
