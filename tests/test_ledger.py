from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from canary.ledger import PING_COUNT, PingLedger, PingRecord


def test_empty_ledger_snapshot() -> None:
    ledger = PingLedger()
    assert ledger.snapshot() == ()
    assert len(ledger) == 0
    assert ledger.capacity == PING_COUNT == 8


@pytest.mark.parametrize("n", [0, 1, 7, 8, 9, 25])
def test_holds_most_recent_min_n_capacity(n: int) -> None:
    ledger = PingLedger()
    for i in range(n):
        ledger.record(f"p{i}")

    reasons = [p.reason for p in ledger.snapshot()]
    expected = [f"p{i}" for i in range(n)][-8:]
    assert reasons == list(reversed(expected))


def test_record_returns_created_entry() -> None:
    ts = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    ledger = PingLedger(clock=lambda: ts)

    rec = ledger.record("deploy finished")

    assert rec == PingRecord(timestamp=ts, reason="deploy finished")
    assert ledger.snapshot() == (rec,)


def test_records_are_immutable() -> None:
    rec = PingLedger().record("x")
    with pytest.raises(ValidationError):
        rec.reason = "y"


def test_snapshot_is_a_copy_and_idempotent() -> None:
    ledger = PingLedger()
    ledger.record("a")
    first = ledger.snapshot()
    second = ledger.snapshot()
    assert first == second
    assert isinstance(first, tuple)

    ledger.record("b")
    assert [p.reason for p in first] == ["a"]


def test_timestamps_never_go_backwards() -> None:
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    times = iter([base, base - timedelta(seconds=30), base + timedelta(seconds=5)])
    ledger = PingLedger(clock=lambda: next(times))

    for reason in ("a", "b", "c"):
        ledger.record(reason)

    stamps = [p.timestamp for p in reversed(ledger.snapshot())]
    assert stamps == [base, base, base + timedelta(seconds=5)]


def test_bound_holds_under_concurrent_writers() -> None:
    ledger = PingLedger()
    seen_sizes = []

    def write(i: int) -> PingRecord:
        rec = ledger.record(f"w{i}")
        seen_sizes.append(len(ledger.snapshot()))
        return rec

    with ThreadPoolExecutor(max_workers=32) as pool:
        created = list(pool.map(write, range(200)))

    snap = ledger.snapshot()
    assert len(snap) == 8
    assert max(seen_sizes) <= 8
    # no duplicates, and every survivor is one of the created records
    assert len({p.reason for p in snap}) == 8
    assert {p.reason for p in snap} <= {p.reason for p in created}
    stamps = [p.timestamp for p in snap]
    assert stamps == sorted(stamps, reverse=True)
