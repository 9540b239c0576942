"""Thread safety of TypeID generation and parsing."""

from __future__ import annotations

import threading
from collections import Counter

from typeid7 import TypeID

from .conftest import UserIdFactory


def _run_threads(targets: list[threading.Thread]) -> None:
    for t in targets:
        t.start()
    for t in targets:
        t.join()


class TestConcurrentGeneration:
    def test_threads_never_share_a_suffix(self) -> None:
        suffixes: list[str] = []
        lock = threading.Lock()
        barrier = threading.Barrier(20)

        def worker() -> None:
            barrier.wait()
            local = [UserIdFactory().suffix for _ in range(500)]
            with lock:
                suffixes.extend(local)

        _run_threads([threading.Thread(target=worker) for _ in range(20)])

        assert len(suffixes) == 20 * 500
        duplicates = [s for s, n in Counter(suffixes).items() if n > 1]
        assert not duplicates

    def test_mixed_prefixes_decode_to_distinct_uuids(self) -> None:
        uuids: list[str] = []
        lock = threading.Lock()

        def worker(prefix: str) -> None:
            local = [TypeID.generate(prefix).to_uuid() for _ in range(300)]
            with lock:
                uuids.extend(local)

        prefixes = ["user", "org", "api_key", "user", "org", "api_key"]
        _run_threads([threading.Thread(target=worker, args=(p,)) for p in prefixes])

        assert len(set(uuids)) == len(uuids) == 6 * 300

    def test_sequence_within_a_thread_is_sorted(self) -> None:
        generated: list[str] = []

        def worker() -> None:
            generated.extend(str(UserIdFactory()) for _ in range(200))

        _run_threads([threading.Thread(target=worker)])

        assert generated == sorted(generated)
        assert len(set(generated)) == len(generated)


class TestConcurrentParsing:
    def test_roundtrips_agree_across_threads(self) -> None:
        ids = [str(UserIdFactory()) for _ in range(200)]
        failures: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            for s in ids:
                tid = TypeID.from_string(s, "user")
                if str(TypeID.from_uuid(tid.to_uuid(), "user")) != s:
                    with lock:
                        failures.append(s)

        _run_threads([threading.Thread(target=worker) for _ in range(8)])

        assert not failures
