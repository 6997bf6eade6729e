"""Ordering policies applied to aggregated buckets."""

from __future__ import annotations

from typing import Iterable, List

from .models import Bucket


def rank_descending(buckets: Iterable[Bucket]) -> List[Bucket]:
    """Sort buckets by total, largest first.

    ``sorted`` is stable, so buckets with equal totals keep the order in which
    their keys were first encountered.
    """

    return sorted(buckets, key=lambda bucket: bucket.total, reverse=True)


def rank_by_key(buckets: Iterable[Bucket]) -> List[Bucket]:
    """Sort buckets by key ascending (``YYYY-MM`` keys sort chronologically)."""

    return sorted(buckets, key=lambda bucket: bucket.key)


def top_n(buckets: Iterable[Bucket], limit: int) -> List[Bucket]:
    """Rank buckets descending and keep the first ``limit`` entries."""

    return rank_descending(buckets)[: max(limit, 0)]
