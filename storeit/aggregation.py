"""Storage usage aggregation over a user's file records."""

from __future__ import annotations

from collections.abc import Iterable

from .models import FileRecord, StorageTotals, TOTAL_STORAGE_BYTES


def calculate_storage_totals(
    records: Iterable[FileRecord],
    capacity: int = TOTAL_STORAGE_BYTES,
) -> StorageTotals:
    """Reduce file records to per-type byte totals.

    Every file type starts with zero bytes and no latest date. Each record
    adds its size to its type and to the grand total, and moves the type's
    latest date forward when the record was updated later. The result does
    not depend on the order of the records.

    Args:
        records: File records owned by the user
        capacity: Total capacity reported as ``all`` (default: 2 GiB)

    Returns:
        StorageTotals for the records
    """
    totals = StorageTotals(all=capacity)

    for record in records:
        usage = totals.usage_for(record.type)
        usage.size += record.size
        totals.used += record.size

        if usage.latest_date is None or record.updated_at > usage.latest_date:
            usage.latest_date = record.updated_at

    return totals
