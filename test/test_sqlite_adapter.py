import pytest
from pytest_asyncio import fixture
import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4
import math
import os
import tempfile

import pydantic_core

from versioned_values import RequiredTextVersion, RequiredValueMissingError, TextVersion, ValueKind
from versioned_values.adaptors.sqlite import sqlite_store_factory
from versioned_values.history import values

from conftest import SUBJECT_ID, T0, TickingClock


@fixture
async def open_store(clock):
    """
    Provides an `open_store` function bound to a clean in-memory database for each test function.
    """
    async with sqlite_store_factory(":memory:", pool_size=2, clock=clock) as factory:
        yield factory


@pytest.mark.asyncio
async def test_draft_then_final(open_store):
    async with open_store(ValueKind.TEXT) as store:
        draft = await store.create_version(SUBJECT_ID, "draft")
        final = await store.create_version(SUBJECT_ID, "final")

        assert (draft.id, final.id) == (1, 2)
        assert draft.subject_id == final.subject_id == SUBJECT_ID
        assert draft.added == T0
        assert final.added == T0 + timedelta(seconds=1)

        history = await store.get_versions_for_subject(SUBJECT_ID, order_by_added=True)
        assert [(v.added, v.value) for v in history] == [(T0, "draft"), (final.added, "final")]
        assert all(isinstance(v, TextVersion) for v in history)


@pytest.mark.asyncio
async def test_reloaded_versions_are_equal(open_store):
    async with open_store(ValueKind.TEXT) as store:
        created = await store.create_version(SUBJECT_ID, "draft")

        first = await store.get_versions_for_subject(SUBJECT_ID)
        second = await store.get_versions_for_subject(SUBJECT_ID)

        assert first[0] is not second[0]
        assert first[0] == second[0] == created
        assert hash(first[0]) == hash(second[0]) == hash(created)


@pytest.mark.asyncio
async def test_subjects_are_isolated(open_store):
    other = uuid4()
    async with open_store(ValueKind.INT32) as store:
        await store.create_version(SUBJECT_ID, 1)
        await store.create_version(other, 2)
        await store.create_version(SUBJECT_ID, 3)

        assert [v.value for v in await store.get_versions_for_subject(SUBJECT_ID)] == [1, 3]
        assert [v.value for v in await store.get_versions_for_subject(str(other))] == [2]
        assert await store.get_versions_for_subject(uuid4()) == []


@pytest.mark.asyncio
async def test_kinds_use_separate_tables(open_store):
    async with open_store(ValueKind.INT32) as ints, open_store(ValueKind.TEXT) as texts:
        await ints.create_version(SUBJECT_ID, 7)
        text = await texts.create_version(SUBJECT_ID, "seven")

        assert text.id == 1
        assert [v.value for v in await ints.get_versions_for_subject(SUBJECT_ID)] == [7]
        assert [v.value for v in await texts.get_versions_for_subject(SUBJECT_ID)] == ["seven"]


@pytest.mark.asyncio
async def test_required_value_is_enforced_before_persisting(open_store):
    async with open_store(ValueKind.REQUIRED_TEXT) as store:
        with pytest.raises(RequiredValueMissingError):
            await store.create_version(SUBJECT_ID, None)

        metrics = await store.metrics()
        assert metrics["version_count"] == 0

        version = await store.create_version(SUBJECT_ID, "final")
        assert isinstance(version, RequiredTextVersion)
        reloaded = await store.get_version(version.id)
        assert reloaded == version
        assert reloaded.value == "final"


@pytest.mark.asyncio
async def test_invalid_payload_is_not_persisted(open_store):
    async with open_store(ValueKind.INT16) as store:
        with pytest.raises(pydantic_core.ValidationError):
            await store.create_version(SUBJECT_ID, 70_000)
        assert await store.get_versions_for_subject(SUBJECT_ID) == []


@pytest.mark.asyncio
async def test_nullable_kind_stores_absent_value(open_store):
    async with open_store(ValueKind.NULLABLE_INT32) as store:
        version = await store.create_version(SUBJECT_ID, None)
        (reloaded,) = await store.get_versions_for_subject(SUBJECT_ID)
        assert reloaded.value is None
        assert reloaded == version
        assert str(reloaded) == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind, value",
    [
        (ValueKind.BOOLEAN, True),
        (ValueKind.BYTE, 255),
        (ValueKind.INT64, -(2**63)),
        (ValueKind.SINGLE, 0.5),
        (ValueKind.DOUBLE, 3.25),
        (ValueKind.DECIMAL, Decimal("12.340")),
        (ValueKind.DATETIME, datetime(2024, 2, 29, 23, 59, 59, 123456)),
        (ValueKind.DATETIME_OFFSET, datetime(2024, 1, 1, 8, tzinfo=timezone(timedelta(hours=2)))),
        (ValueKind.GUID, UUID("0b9c6ef1-3c3c-4c7e-9d67-1f7b0a7b3f11")),
        (ValueKind.BLOB, b"\x00\xff\x10"),
        (ValueKind.REQUIRED_BLOB, b""),
        (ValueKind.TEXT, "héllo"),
    ],
)
async def test_values_survive_storage(open_store, kind, value):
    async with open_store(kind) as store:
        created = await store.create_version(SUBJECT_ID, value)
        reloaded = await store.get_version(created.id)
        assert reloaded == created
        assert reloaded.value == value
        assert type(reloaded.value) is type(value)


@pytest.mark.asyncio
async def test_decimal_keeps_its_digits(open_store):
    async with open_store(ValueKind.DECIMAL) as store:
        created = await store.create_version(SUBJECT_ID, Decimal("12.340"))
        reloaded = await store.get_version(created.id)
        assert str(reloaded.value) == "12.340"


@pytest.mark.asyncio
async def test_nan_double_survives_storage(open_store):
    async with open_store(ValueKind.DOUBLE) as store:
        created = await store.create_version(SUBJECT_ID, float("nan"))
        reloaded = await store.get_version(created.id)
        assert math.isnan(reloaded.value)
        assert reloaded == created


@pytest.mark.asyncio
async def test_get_missing_version(open_store):
    async with open_store(ValueKind.TEXT) as store:
        assert await store.get_version(42) is None


@pytest.mark.asyncio
async def test_invalid_rows_are_skipped(open_store):
    async with open_store(ValueKind.INT16) as store:
        await store.create_version(SUBJECT_ID, 1)
        await store.write_conn.execute(
            "INSERT INTO versions_int16 (subject_id, added, value) VALUES (?, ?, ?)",
            (str(SUBJECT_ID), T0.isoformat(), 70_000),
        )
        await store.write_conn.commit()

        versions = await store.get_versions_for_subject(SUBJECT_ID)
        assert [v.value for v in versions] == [1]
        assert await store.get_version(2) is None


@pytest.mark.asyncio
async def test_metrics(open_store):
    async with open_store(ValueKind.TEXT) as store:
        metrics = await store.metrics()
        assert metrics["kind"] is ValueKind.TEXT
        assert metrics["version_count"] == 0
        assert metrics["subject_count"] == 0
        assert metrics["last_added"] is None

        await store.create_version(SUBJECT_ID, "a")
        last = await store.create_version(uuid4(), "b")
        metrics = await store.metrics()
        assert metrics["version_count"] == 2
        assert metrics["subject_count"] == 2
        assert metrics["last_added"] == last.added


@pytest.mark.asyncio
async def test_concurrent_writers_get_unique_ids(open_store):
    async with open_store(ValueKind.INT32) as store:
        versions = await asyncio.gather(
            *(store.create_version(SUBJECT_ID, i) for i in range(20))
        )
        assert sorted(v.id for v in versions) == list(range(1, 21))
        stored = await store.get_versions_for_subject(SUBJECT_ID)
        assert sorted(v.value for v in stored) == list(range(20))


@pytest.mark.asyncio
async def test_file_persistence():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = os.path.join(tmpdir, "versions.db")

        # Session 1: record two versions
        async with sqlite_store_factory(db_path, clock=TickingClock()) as open_store:
            async with open_store(ValueKind.TEXT) as store:
                await store.create_version(SUBJECT_ID, "draft")
                await store.create_version(SUBJECT_ID, "final")

        # Session 2: read them back and keep appending
        async with sqlite_store_factory(db_path, clock=TickingClock(T0 + timedelta(days=1))) as open_store:
            async with open_store(ValueKind.TEXT) as store:
                history = await store.get_versions_for_subject(SUBJECT_ID, order_by_added=True)
                assert values(history) == ["draft", "final"]

                third = await store.create_version(SUBJECT_ID, "published")
                assert third.id == 3


@pytest.mark.asyncio
async def test_db_path_is_required():
    with pytest.raises(ValueError, match="`db_path` must be provided"):
        async with sqlite_store_factory(""):
            pass


@pytest.mark.asyncio
async def test_memory_db_reads_overlap_writes(open_store):
    async with open_store(ValueKind.TEXT) as store:
        async def writer():
            for i in range(50):
                await store.create_version(SUBJECT_ID, f"value-{i}")

        async def reader():
            seen = []
            for _ in range(50):
                seen.append(len(await store.get_versions_for_subject(SUBJECT_ID)))
                await store.metrics()
            return seen

        _, *reads = await asyncio.gather(writer(), reader(), reader(), reader())

        for seen in reads:
            assert seen == sorted(seen)
        assert len(await store.get_versions_for_subject(SUBJECT_ID)) == 50


@pytest.mark.asyncio
async def test_file_db_reads_overlap_writes():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = os.path.join(tmpdir, "versions.db")
        async with sqlite_store_factory(db_path, pool_size=2) as open_store:
            async with open_store(ValueKind.INT32) as store:
                async def writer():
                    for i in range(30):
                        await store.create_version(SUBJECT_ID, i)

                async def reader():
                    for _ in range(30):
                        await store.get_versions_for_subject(SUBJECT_ID)

                await asyncio.gather(writer(), reader(), reader(), reader())
                assert len(await store.get_versions_for_subject(SUBJECT_ID)) == 30


@pytest.mark.asyncio
async def test_checked_out_connection_is_closed_on_exit():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = os.path.join(tmpdir, "versions.db")
        async with sqlite_store_factory(db_path, pool_size=1) as open_store:
            async with open_store(ValueKind.TEXT) as store:
                reading = store._read_conn()
                held = await reading.__aenter__()
                assert store.read_pool.empty()

        with pytest.raises(ValueError):
            await held.execute("SELECT 1")
        with pytest.raises(ValueError):
            await store.write_conn.execute("SELECT 1")
        await reading.__aexit__(None, None, None)
