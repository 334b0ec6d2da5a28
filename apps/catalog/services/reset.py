"""
Wiping the catalog, guarded by a three-step confirmation.

The confirmation counter moves Idle -> Confirming(1) -> Confirming(2) and
resets the data on the third confirm. Cancelling at any point returns to
Idle. Over HTTP the counter lives in the preference store so it survives
between requests.
"""

import logging

from apps.preferences.services.store import get_preference, set_preference, delete_preference

from ..models import Service, Category
from .persistence import committing, refresh

logger = logging.getLogger(__name__)

REQUIRED_CONFIRMATIONS = 3
RESET_COUNTER_KEY = 'resetConfirmationCount'


class ResetConfirmation:
    """
    Counts confirmations before a destructive reset.

    Example:
        confirmation = ResetConfirmation()
        confirmation.confirm()  # False, 2 remaining
        confirmation.confirm()  # False, 1 remaining
        confirmation.confirm()  # True, counter back to 0
    """

    IDLE = 'idle'
    CONFIRMING = 'confirming'

    def __init__(self, count: int = 0):
        self.count = max(0, min(int(count), REQUIRED_CONFIRMATIONS - 1))

    @property
    def state(self) -> str:
        return self.CONFIRMING if self.count else self.IDLE

    @property
    def remaining(self) -> int:
        return REQUIRED_CONFIRMATIONS - self.count

    def confirm(self) -> bool:
        """Register one confirmation. Returns True when the reset should run."""
        self.count += 1
        if self.count >= REQUIRED_CONFIRMATIONS:
            self.count = 0
            return True
        return False

    def cancel(self) -> None:
        self.count = 0


def reset_all_data(*, store=None) -> None:
    """
    Delete every service and category.

    Raises:
        SaveFailedError: If the database write fails
    """
    with committing():
        services, _ = Service.objects.all().delete()
        categories, _ = Category.objects.all().delete()

    logger.warning("All data reset (%d services, %d categories removed)", services, categories)
    refresh(store)


def load_confirmation() -> ResetConfirmation:
    count = get_preference(RESET_COUNTER_KEY, 0)
    if not isinstance(count, int):
        count = 0
    return ResetConfirmation(count)


def confirm_reset(*, store=None) -> tuple[bool, ResetConfirmation]:
    """
    Register one persisted confirmation and reset on the last one.

    Returns:
        (reset_performed, confirmation after this step)

    Raises:
        SaveFailedError: If the reset fails
    """
    confirmation = load_confirmation()

    performed = confirmation.confirm()
    if performed:
        delete_preference(RESET_COUNTER_KEY)
        reset_all_data(store=store)
    else:
        set_preference(RESET_COUNTER_KEY, confirmation.count)

    return performed, confirmation


def cancel_reset() -> ResetConfirmation:
    delete_preference(RESET_COUNTER_KEY)
    return ResetConfirmation()
