"""Tests for Day-0 window checks against registry publish times."""

from datetime import datetime, timedelta, timezone

import pytest

from day0_guard.freshness import check, parse_timestamp, scan
from day0_guard.models import DependencySet, DependencySpec

from conftest import NOW, FakeRegistry, iso

WINDOW = timedelta(hours=24)


def _deps(*specs: str) -> DependencySet:
    deps = DependencySet()
    for spec in specs:
        parsed = DependencySpec.parse(spec)
        deps.add(parsed.name, parsed.version)
    return deps


class TestCheck:
    def test_recent_publish_is_a_violation(self, fresh_and_stale_registry):
        violations = check(_deps("left-pad@9.9.9"), WINDOW, NOW, fresh_and_stale_registry)

        assert [(v.name, v.version) for v in violations] == [("left-pad", "9.9.9")]
        assert violations[0].published_at == NOW - timedelta(hours=1)

    def test_old_publish_is_not_a_violation(self, fresh_and_stale_registry):
        assert check(_deps("left-pad@1.3.0"), WINDOW, NOW, fresh_and_stale_registry) == []

    def test_scoped_names_are_split_at_last_at(self):
        registry = FakeRegistry({"@acme/util": {"2.0.0": iso(NOW - timedelta(minutes=5))}})

        violations = check(["@acme/util@2.0.0"], WINDOW, NOW, registry)

        assert violations[0].name == "@acme/util"
        assert violations[0].version == "2.0.0"
        assert registry.lookups == {"@acme/util": 1}

    def test_entries_without_meaningful_split_are_skipped(self):
        registry = FakeRegistry()

        assert check(["lodash", "@lodash", "bad@"], WINDOW, NOW, registry) == []
        assert not registry.lookups

    def test_unknown_package_or_version_is_not_a_violation(self, fresh_and_stale_registry):
        deps = _deps("left-pad@0.0.1", "missing@1.0.0")

        assert check(deps, WINDOW, NOW, fresh_and_stale_registry) == []

    def test_lookup_failure_does_not_abort_batch(self, caplog):
        registry = FakeRegistry(
            {"fresh": {"1.0.0": iso(NOW - timedelta(hours=2))}},
            failing={"flaky"},
        )

        violations = check(_deps("flaky@1.0.0", "fresh@1.0.0"), WINDOW, NOW, registry)

        assert [v.name for v in violations] == ["fresh"]
        assert "flaky@1.0.0" in caplog.text

    def test_each_name_is_fetched_once(self):
        registry = FakeRegistry(
            {"lodash": {"4.17.20": iso(NOW - timedelta(days=900)), "4.17.21": iso(NOW - timedelta(hours=3))}}
        )

        violations = check(_deps("lodash@4.17.20", "lodash@4.17.21"), WINDOW, NOW, registry)

        assert [v.version for v in violations] == ["4.17.21"]
        assert registry.lookups == {"lodash": 1}

    def test_stops_at_max_violations(self):
        times = {f"p{i}": {"1.0.0": iso(NOW - timedelta(hours=1))} for i in range(5)}
        registry = FakeRegistry(times)

        violations = check(
            _deps(*(f"p{i}@1.0.0" for i in range(5))), WINDOW, NOW, registry, max_violations=2
        )

        assert [v.name for v in violations] == ["p0", "p1"]
        assert sum(registry.lookups.values()) == 2

    def test_reaching_the_cap_early_is_reported_as_truncated(self):
        times = {f"p{i}": {"1.0.0": iso(NOW - timedelta(hours=1))} for i in range(3)}

        report = scan(
            _deps("p0@1.0.0", "p1@1.0.0", "p2@1.0.0"),
            WINDOW,
            NOW,
            FakeRegistry(times),
            max_violations=2,
        )

        assert [v.name for v in report.violations] == ["p0", "p1"]
        assert report.truncated

    def test_exactly_max_violations_is_not_truncated(self):
        times = {f"p{i}": {"1.0.0": iso(NOW - timedelta(hours=1))} for i in range(2)}

        report = scan(
            _deps("p0@1.0.0", "p1@1.0.0"), WINDOW, NOW, FakeRegistry(times), max_violations=2
        )

        assert len(report.violations) == 2
        assert not report.truncated

    def test_cap_not_reached_is_not_truncated(self, fresh_and_stale_registry):
        report = scan(_deps("left-pad@9.9.9", "left-pad@1.3.0"), WINDOW, NOW, fresh_and_stale_registry)

        assert [v.version for v in report.violations] == ["9.9.9"]
        assert not report.truncated

    def test_violations_keep_iteration_order(self):
        registry = FakeRegistry(
            {
                "zeta": {"1.0.0": iso(NOW - timedelta(hours=1))},
                "alpha": {"1.0.0": iso(NOW - timedelta(hours=2))},
            }
        )

        violations = check(_deps("zeta@1.0.0", "alpha@1.0.0"), WINDOW, NOW, registry)

        assert [v.name for v in violations] == ["zeta", "alpha"]

    def test_unreadable_timestamp_is_skipped(self):
        registry = FakeRegistry({"odd": {"1.0.0": "yesterday-ish"}})

        assert check(_deps("odd@1.0.0"), WINDOW, NOW, registry) == []

    def test_naive_now_is_rejected(self):
        with pytest.raises(ValueError):
            check([], WINDOW, datetime(2025, 1, 1), FakeRegistry())


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2025-09-15T11:00:00.000Z", datetime(2025, 9, 15, 11, tzinfo=timezone.utc)),
        ("2025-09-15T11:00:00+00:00", datetime(2025, 9, 15, 11, tzinfo=timezone.utc)),
        ("2025-09-15T11:00:00", datetime(2025, 9, 15, 11, tzinfo=timezone.utc)),
        ("not a date", None),
    ],
)
def test_parse_timestamp(raw, expected):
    assert parse_timestamp(raw) == expected
