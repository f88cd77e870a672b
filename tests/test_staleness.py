import pytest

from debtradar.staleness import scan_staleness, stale_severity

from helpers import NOW, StubHistory


@pytest.mark.parametrize(
    "age,fan_in,expected",
    [
        (400, 12, "critical"),
        (400, 10, "critical"),
        (400, 5, "high"),
        (200, 5, "high"),
        (200, 3, "medium"),
        (100, 3, "medium"),
    ],
)
def test_severity_table(age, fan_in, expected):
    assert stale_severity(age, fan_in, import_threshold=5) == expected


def test_flags_old_heavily_imported_files():
    history = StubHistory(modified={"core.ts": 400, "young.ts": 10, "lonely.ts": 800})
    fan_in = {"core.ts": 12, "young.ts": 40, "lonely.ts": 1}

    items = scan_staleness(["core.ts", "young.ts", "lonely.ts", "untracked.ts"], fan_in, history, now=NOW)

    assert len(items) == 1
    item = items[0]
    assert item.kind == "stale"
    assert item.file == "core.ts"
    assert item.severity == "critical"
    assert item.age_in_days == 400
    assert item.line is None
    assert item.message == "File untouched for 400 days but imported by 12 files"


def test_thresholds_are_configurable():
    history = StubHistory(modified={"x.ts": 200})
    items = scan_staleness(["x.ts"], {"x.ts": 2}, history, days_threshold=150, import_threshold=2, now=NOW)
    assert [it.severity for it in items] == ["high"]


def test_fan_in_at_threshold_is_high():
    history = StubHistory(modified={"x.ts": 400})
    [item] = scan_staleness(["x.ts"], {"x.ts": 5}, history, now=NOW)
    assert item.severity == "high"


def test_without_history_nothing_is_stale():
    history = StubHistory(repo=False, modified={"x.ts": 900})
    assert scan_staleness(["x.ts"], {"x.ts": 50}, history, now=NOW) == []
