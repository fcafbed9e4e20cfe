"""
Archive-and-retrain pipeline tests
"""
import json
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock, patch

from backend.services.archive_pipeline import (
    archive_today,
    closing_day,
    recalibrate,
    reset_today,
    run_daily_job,
    upsert_archive_entry,
)
from backend.services.trainer import TrainingResult

DAY = date(2024, 6, 1)


# ===================== ARCHIVE =====================


class TestArchive:

    async def test_creates_entry(self, store):
        store.write("today", [{"id": "1", "name": "Biryani", "totalPlates": 12}])

        archived = await archive_today(store, DAY)

        assert archived["date"] == "2024-06-01"
        assert store.read("modelData", []) == [
            {"date": "2024-06-01", "items": [{"id": "1", "name": "Biryani", "totalPlates": 12}]},
        ]

    async def test_same_day_twice_keeps_last(self, store):
        store.write("today", [{"id": "1", "totalPlates": 5}])
        await archive_today(store, DAY)

        store.write("today", [{"id": "2", "totalPlates": 9}, {"id": "3", "totalPlates": 1}])
        await archive_today(store, DAY)

        archive = store.read("modelData", [])
        assert len([e for e in archive if e["date"] == "2024-06-01"]) == 1
        assert archive[0]["items"] == [{"id": "2", "totalPlates": 9}, {"id": "3", "totalPlates": 1}]

    async def test_empty_today_still_archived(self, store):
        await archive_today(store, DAY)
        assert store.read("modelData", []) == [{"date": "2024-06-01", "items": []}]

    async def test_empty_today_overwrites_existing_entry(self, store):
        store.write("modelData", [{"date": "2024-06-01", "items": [{"id": "x"}]}])
        await archive_today(store, DAY)
        assert store.read("modelData", []) == [{"date": "2024-06-01", "items": []}]

    async def test_archive_is_sorted_and_mirrored(self, store):
        store.write("modelData", [
            {"date": "2024-06-03", "items": []},
            {"date": "2024-05-30", "items": []},
        ])
        await archive_today(store, DAY)

        dates = [e["date"] for e in store.read("modelData", [])]
        assert dates == ["2024-05-30", "2024-06-01", "2024-06-03"]
        mirrored = json.loads(store.public_path("modelData").read_text())
        assert [e["date"] for e in mirrored] == dates

    async def test_archive_does_not_clear_today(self, store):
        store.write("today", [{"id": "1"}])
        await archive_today(store, DAY)
        assert store.read("today", []) == [{"id": "1"}]

    async def test_defaults_to_today(self, store):
        archived = await archive_today(store)
        assert archived["date"] == date.today().isoformat()


def test_upsert_appends_new_date():
    archive = [{"date": "2024-01-02", "items": []}]
    result = upsert_archive_entry(archive, "2024-01-01", [{"a": 1}])
    assert result == [
        {"date": "2024-01-01", "items": [{"a": 1}]},
        {"date": "2024-01-02", "items": []},
    ]


def test_closing_day():
    assert closing_day(datetime(2024, 6, 2, 0, 0)) == date(2024, 6, 1)
    assert closing_day(datetime(2024, 6, 1, 23, 30)) == date(2024, 6, 1)


# ===================== RESET =====================


async def test_reset_clears_both_locations(store):
    store.write_both("today", [{"id": "1"}])
    await reset_today(store)
    assert store.read("today", ["sentinel"]) == []
    assert json.loads(store.public_path("today").read_text()) == []


# ===================== RECALIBRATE =====================


class TestRecalibrate:

    async def test_success_stamps_summary(self, store):
        store.write("predicted", {"best": "Dal", "epsilon": 0.1})

        with patch(
            "backend.services.archive_pipeline.run_trainer",
            new_callable=AsyncMock,
            return_value=TrainingResult(success=True, returncode=0),
        ):
            result, summary = await recalibrate(store)

        assert result.success
        assert summary["best"] == "Dal"
        assert summary["lastCalibrated"]
        assert store.read("predicted", {})["lastCalibrated"] == summary["lastCalibrated"]
        mirrored = json.loads(store.public_path("predicted").read_text())
        assert mirrored["lastCalibrated"] == summary["lastCalibrated"]

    async def test_failure_leaves_summary_untouched(self, store):
        store.write("predicted", {"best": "Dal"})

        with patch(
            "backend.services.archive_pipeline.run_trainer",
            new_callable=AsyncMock,
            return_value=TrainingResult(success=False, returncode=1, diagnostic="boom"),
        ):
            result, summary = await recalibrate(store)

        assert not result.success
        assert summary is None
        assert store.read("predicted", {}) == {"best": "Dal"}


# ===================== DAILY JOB =====================


class TestDailyJob:

    async def test_archives_resets_and_launches_training(self, store):
        store.write("today", [{"id": "1", "totalPlates": 4}])
        store.write("events", [
            {"id": "old", "date": "2000-01-01"},
            {"id": "new", "date": "2999-01-01"},
        ])

        with patch("backend.services.archive_pipeline.launch_trainer", MagicMock()) as launch:
            result = await run_daily_job(store, DAY)

        assert result == {"archived_date": "2024-06-01", "archived_items": 1}
        assert store.read("modelData", []) == [
            {"date": "2024-06-01", "items": [{"id": "1", "totalPlates": 4}]},
        ]
        assert store.read("today", ["sentinel"]) == []
        assert [e["id"] for e in store.read("events", [])] == ["new"]
        launch.assert_called_once()

    async def test_compaction_failure_does_not_stop_training(self, store):
        with patch("backend.services.archive_pipeline.launch_trainer", MagicMock()) as launch, \
                patch("backend.services.archive_pipeline.compact_events",
                      new_callable=AsyncMock, side_effect=RuntimeError("bad")):
            await run_daily_job(store, DAY)

        launch.assert_called_once()
        assert store.read("modelData", []) == [{"date": "2024-06-01", "items": []}]
