"""
Caller-side helpers over a subject's history.

Stores do not impose an order on the versions they return; these functions use
the `added` timestamp (ties broken by `id`) to answer the usual questions.
"""
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional


def order_by_added(versions: Iterable) -> List:
    """Oldest first."""
    return sorted(versions, key=lambda v: (v.added, v.id))


def latest(versions: Iterable) -> Optional[Any]:
    ordered = order_by_added(versions)
    return ordered[-1] if ordered else None


def _at_or_before(added: datetime, at: datetime) -> bool:
    # A naive moment compared with an aware one is taken as UTC, the default store clock.
    if added.tzinfo is None and at.tzinfo is not None:
        added = added.replace(tzinfo=timezone.utc)
    elif at.tzinfo is None and added.tzinfo is not None:
        at = at.replace(tzinfo=timezone.utc)
    return added <= at


def as_of(versions: Iterable, at: datetime) -> Optional[Any]:
    """
    Returns the version in effect at `at`: the newest one added at or before it.
    A naive `at` against aware timestamps (or the reverse) is read as UTC.
    """
    candidates = [v for v in versions if _at_or_before(v.added, at)]
    return latest(candidates)


def values(versions: Iterable) -> List[Any]:
    return [v.value for v in order_by_added(versions)]
