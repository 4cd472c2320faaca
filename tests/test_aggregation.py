"""Tests for storage usage aggregation."""

import itertools
from datetime import datetime, timedelta, timezone

from storeit.aggregation import calculate_storage_totals
from storeit.models import FileRecord, FileType

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_record(file_type: str, size: int, updated_at: datetime, n: int = 1) -> FileRecord:
    return FileRecord.model_validate(
        {
            "$id": f"doc_{n}",
            "$createdAt": T0.isoformat(),
            "$updatedAt": updated_at.isoformat(),
            "type": file_type,
            "name": f"file_{n}",
            "url": f"https://backend.test/files/blob_{n}/view",
            "extension": "",
            "size": size,
            "owner": "user_1",
            "accountId": "acct_1",
            "users": [],
            "bucketFileId": f"blob_{n}",
        }
    )


class TestCalculateStorageTotals:
    """Tests for calculate_storage_totals."""

    def test_empty(self):
        totals = calculate_storage_totals([])

        assert totals.used == 0
        assert totals.all == 2147483648
        for file_type in FileType:
            usage = totals.usage_for(file_type)
            assert usage.size == 0
            assert usage.latest_date is None
        assert totals.to_dict()["image"] == {"size": 0, "latestDate": ""}

    def test_single_record(self):
        totals = calculate_storage_totals([make_record("image", 1000, T0)])

        assert totals.usage_for(FileType.IMAGE).size == 1000
        assert totals.usage_for(FileType.IMAGE).latest_date == T0
        assert totals.used == 1000
        for file_type in (FileType.DOCUMENT, FileType.VIDEO, FileType.AUDIO, FileType.OTHER):
            assert totals.usage_for(file_type).size == 0
            assert totals.usage_for(file_type).latest_date is None

    def test_sums_per_type_and_total(self):
        records = [
            make_record("image", 100, T0, 1),
            make_record("image", 250, T0, 2),
            make_record("document", 40, T0, 3),
            make_record("other", 7, T0, 4),
        ]

        totals = calculate_storage_totals(records)

        assert totals.usage_for(FileType.IMAGE).size == 350
        assert totals.usage_for(FileType.DOCUMENT).size == 40
        assert totals.usage_for(FileType.OTHER).size == 7
        assert totals.used == 397

    def test_latest_date_any_order(self):
        t1 = T0
        t2 = T0 + timedelta(hours=5)
        records = [make_record("image", 1, t1, 1), make_record("image", 1, t2, 2)]

        for ordering in itertools.permutations(records):
            totals = calculate_storage_totals(ordering)
            assert totals.usage_for(FileType.IMAGE).latest_date == t2

    def test_equal_timestamps_keep_first(self):
        first = make_record("video", 1, T0, 1)
        second = make_record("video", 1, T0, 2)

        totals = calculate_storage_totals([first, second])

        assert totals.usage_for(FileType.VIDEO).latest_date == T0

    def test_result_independent_of_order(self):
        records = [
            make_record("audio", 10, T0 + timedelta(days=i), i) for i in range(4)
        ] + [make_record("document", 3, T0 - timedelta(days=1), 9)]

        expected = calculate_storage_totals(records).to_dict()
        assert calculate_storage_totals(reversed(records)).to_dict() == expected

    def test_custom_capacity(self):
        totals = calculate_storage_totals([], capacity=1024)
        assert totals.all == 1024

    def test_accepts_generator(self):
        totals = calculate_storage_totals(
            make_record("image", 5, T0, i) for i in range(3)
        )
        assert totals.used == 15

    def test_latest_date_matches_backend_timestamp(self):
        payload = make_record("image", 1, T0).model_dump(by_alias=True, mode="json")
        payload["$updatedAt"] = "2024-05-01T12:00:00.000+00:00"
        stored = FileRecord.model_validate(payload)

        totals = calculate_storage_totals([stored])

        assert totals.to_dict()["image"]["latestDate"] == "2024-05-01T12:00:00.000+00:00"
