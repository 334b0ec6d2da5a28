"""Services for catalog business logic."""

from .exceptions import (
    CatalogServiceError,
    ServiceValidationError,
    EmptyNameError,
    InvalidPriceError,
    PriceTooLargeError,
    PhotoTooLargeError,
    PersistenceError,
    SaveFailedError,
    ServiceNotFoundError,
    CategoryNotFoundError,
    InvalidReorderError,
)
from .store import CatalogStore
from .validation import (
    validate_service_input,
    clean_name,
    clean_price,
)
from .service_management import (
    add_service,
    update_service,
    delete_service,
    toggle_favorite,
    duplicate_service,
)
from .category_management import (
    add_category,
    update_category,
    delete_category,
    reorder_categories,
    move_categories,
    move_offsets,
)
from .filtering import (
    SortOrder,
    filter_services,
    sort_services,
    search_categories,
    parse_price_bound,
    favorites,
)
from .backup import (
    create_backup,
    dump_backup,
    restore_backup,
    backup_filename,
)
from .export import (
    generate_csv,
    csv_filename,
)
from .reset import (
    ResetConfirmation,
    reset_all_data,
    load_confirmation,
    confirm_reset,
    cancel_reset,
)

__all__ = [
    # Exceptions
    'CatalogServiceError',
    'ServiceValidationError',
    'EmptyNameError',
    'InvalidPriceError',
    'PriceTooLargeError',
    'PhotoTooLargeError',
    'PersistenceError',
    'SaveFailedError',
    'ServiceNotFoundError',
    'CategoryNotFoundError',
    'InvalidReorderError',
    # Store
    'CatalogStore',
    # Validation
    'validate_service_input',
    'clean_name',
    'clean_price',
    # Service Management
    'add_service',
    'update_service',
    'delete_service',
    'toggle_favorite',
    'duplicate_service',
    # Category Management
    'add_category',
    'update_category',
    'delete_category',
    'reorder_categories',
    'move_categories',
    'move_offsets',
    # Filtering
    'SortOrder',
    'filter_services',
    'sort_services',
    'search_categories',
    'parse_price_bound',
    'favorites',
    # Backup
    'create_backup',
    'dump_backup',
    'restore_backup',
    'backup_filename',
    # Export
    'generate_csv',
    'csv_filename',
    # Reset
    'ResetConfirmation',
    'reset_all_data',
    'load_confirmation',
    'confirm_reset',
    'cancel_reset',
]
