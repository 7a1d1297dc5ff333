"""Reference time for relative analytics periods."""

from datetime import datetime

from crypto_journal.config import get_settings


def get_now() -> datetime:
    """Current time in the configured timezone.

    Routes take this as a dependency so the analytics engine never reads
    the clock itself and tests can pin the time.
    """
    return datetime.now(get_settings().zoneinfo)
