import argparse
import asyncio
import time
import uuid

from versioned_values import ValueKind
from versioned_values.adaptors.sqlite import sqlite_store_factory


async def write_versions(store, subject_ids, versions_per_subject):
    for i in range(versions_per_subject):
        await asyncio.gather(
            *(store.create_version(subject_id, f"value-{i}") for subject_id in subject_ids)
        )


async def run_benchmark(num_subjects, versions_per_subject):
    subject_ids = [uuid.uuid4() for _ in range(num_subjects)]
    total = num_subjects * versions_per_subject
    async with sqlite_store_factory(":memory:") as open_store:
        async with open_store(ValueKind.TEXT) as store:
            start_time = time.perf_counter()
            await write_versions(store, subject_ids, versions_per_subject)
            write_duration = time.perf_counter() - start_time

            start_time = time.perf_counter()
            histories = await asyncio.gather(
                *(store.get_versions_for_subject(s, order_by_added=True) for s in subject_ids)
            )
            read_duration = time.perf_counter() - start_time

            assert sum(len(h) for h in histories) == total

    print(f"Created {total} versions in {write_duration:.2f}s ({total / write_duration:,.0f} versions/s)")
    print(f"Read {num_subjects} histories in {read_duration:.2f}s ({total / read_duration:,.0f} versions/s)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--subjects", type=int, default=100)
    parser.add_argument("--versions", type=int, default=100)
    args = parser.parse_args()
    asyncio.run(run_benchmark(args.subjects, args.versions))
