"""End-to-end tests for schedule resolution."""
from datetime import date, timedelta

import pytest

from conftest import AS_OF, MONDAY, weekday_patterns
from roster.engine.resolver import (
    ResolutionCache,
    ScheduleResolver,
    build_resolution,
    resolve_schedule,
)
from roster.errors import RosterSourceError
from roster.models.assignment import Anomaly, AssignmentKind, PTOType, ScheduleSource
from roster.models.config import EngineConfig
from roster.models.officer import Officer
from roster.models.records import RecurringAssignment, ScheduleException, StaffingRequirement
from roster.sources.memory import InMemoryRosterSource


class CountingSource(InMemoryRosterSource):
    """Records how often each query is issued."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def fetch_exceptions(self, shift_id, start, end):
        self.calls.append("exceptions")
        return super().fetch_exceptions(shift_id, start, end)


class TestScenarios:
    """Behaviour on small hand-built rosters."""

    def test_monday_vacation_then_regular(self):
        pattern = RecurringAssignment(id="r1", officer_id="ofc1", shift_id="day", day_of_week=1,
                                      position="District 1")
        vacation = ScheduleException(id="e1", officer_id="ofc1", shift_id="day", date=date(2024, 1, 8),
                                     is_off=True, reason="Vacation")
        source = InMemoryRosterSource(officers=[Officer(id="ofc1", name="Carol Chen")],
                                      recurring=[pattern], exceptions=[vacation])

        res = resolve_schedule(source, "day", date(2024, 1, 8), date(2024, 1, 15), as_of=AS_OF)

        off = res.per_date[date(2024, 1, 8)][0]
        assert off.kind is AssignmentKind.TIME_OFF
        assert off.pto.pto_type is PTOType.VACATION
        assert off.is_regular_recurring_day is False

        back = res.per_date[date(2024, 1, 15)][0]
        assert back.kind is AssignmentKind.REGULAR
        assert back.position == "District 1"
        assert back.is_regular_recurring_day is True

    def test_tuesday_two_supervisors(self):
        officers = [Officer(id="sgt", rank="Sergeant"), Officer(id="lt", rank="Lieutenant")]
        recurring = weekday_patterns("sgt", position="Supervisor", days=(2,)) + \
            weekday_patterns("lt", position="Supervisor", days=(2,))
        req = StaffingRequirement(shift_id="day", day_of_week=2, minimum_supervisors=2)
        source = InMemoryRosterSource(officers=officers, recurring=recurring, requirements=[req])
        tuesday = date(2024, 1, 2)

        verdict = resolve_schedule(source, "day", tuesday, tuesday, as_of=AS_OF).staffing_by_date[tuesday]

        assert verdict.current_supervisors == 2
        assert not verdict.is_understaffed

    def test_na_badge_after_numeric(self, sample_source):
        res = resolve_schedule(sample_source, "day", MONDAY, MONDAY, as_of=AS_OF)
        assert [ro.id for ro in res.categorized.regular_officers] == ["ofc1", "ofc2"]

    def test_assignments_follow_roster_order(self, sample_source):
        res = resolve_schedule(sample_source, "day", MONDAY, MONDAY, as_of=AS_OF)
        assert [a.officer_id for a in res.per_date[MONDAY]] == ["lt1", "sgt1", "ofc1", "ofc2", "ppo1"]

    def test_week_staffing(self, sample_source):
        res = resolve_schedule(sample_source, "day", MONDAY, MONDAY + timedelta(days=13), as_of=AS_OF)

        # Weekends have nobody scheduled
        assert res.staffing_by_date[date(2024, 1, 6)].is_understaffed
        # ofc1 on vacation: ofc2 alone is short of two officers
        jan8 = res.staffing_by_date[date(2024, 1, 8)]
        assert jan8.current_officers == 1
        assert jan8.current_probationary == 1
        assert jan8.shortfall_description == "1 Officer(s)"
        assert not res.staffing_by_date[date(2024, 1, 9)].is_understaffed

    def test_off_without_reason_surfaces_anomaly(self, sample_officers, sample_recurring):
        bad = ScheduleException(id="bad", officer_id="ofc2", shift_id="day", date=MONDAY, is_off=True)
        source = InMemoryRosterSource(officers=sample_officers, recurring=sample_recurring, exceptions=[bad])

        res = resolve_schedule(source, "day", MONDAY, MONDAY, as_of=AS_OF)

        assert [a.anomaly for a in res.anomalies()] == [Anomaly.OFF_UNSPECIFIED]
        assert res.anomalies()[0].to_dict()["label"] == "Off, unspecified"
        assert res.staffing_by_date[MONDAY].current_officers == 1

    def test_unknown_officer_gets_placeholder(self):
        exc = ScheduleException(id="e", officer_id="ghost", shift_id="day", date=MONDAY, position="Desk")
        res = resolve_schedule(InMemoryRosterSource(exceptions=[exc]), "day", MONDAY, MONDAY, as_of=AS_OF)

        ghost = res.officers["ghost"]
        assert (ghost.name, ghost.badge_number, ghost.rank) == ("Unknown", "9999", "Officer")

    def test_configured_placeholders(self):
        exc = ScheduleException(id="e", officer_id="ghost", shift_id="day", date=MONDAY)
        config = EngineConfig(unknown_name="TBD", unknown_badge="0")
        res = resolve_schedule(InMemoryRosterSource(exceptions=[exc]), "day", MONDAY, MONDAY,
                               config=config, as_of=AS_OF)
        assert res.officers["ghost"].name == "TBD"
        assert res.officers["ghost"].badge_number == "0"

    def test_overtime_from_other_primary_shift(self, sample_officers, sample_recurring):
        night_regular = weekday_patterns("night1", shift_id="night", days=(1, 2, 3, 4, 5))
        fill_in = ScheduleException(id="ot", officer_id="night1", shift_id="day", date=MONDAY, position="Patrol")
        source = InMemoryRosterSource(officers=sample_officers + [Officer(id="night1")],
                                      recurring=sample_recurring + night_regular, exceptions=[fill_in])

        res = resolve_schedule(source, "day", MONDAY, MONDAY, as_of=AS_OF)

        ot = [a for a in res.per_date[MONDAY] if a.officer_id == "night1"][0]
        assert ot.kind is AssignmentKind.OVERTIME
        assert ot.source is ScheduleSource.EXCEPTION
        assert res.staffing_by_date[MONDAY].current_officers == 3


class TestFailures:
    """Degradation and propagation of source failures."""

    def test_seniority_failure_scores_zero(self, sample_officers, sample_recurring):
        class FlakySource(InMemoryRosterSource):
            def fetch_seniority_input(self, officer_id):
                if officer_id == "ofc1":
                    raise TimeoutError("lookup timed out")
                return super().fetch_seniority_input(officer_id)

        source = FlakySource(officers=sample_officers, recurring=sample_recurring)
        res = resolve_schedule(source, "day", MONDAY, MONDAY, as_of=AS_OF)

        assert res.seniority["ofc1"] == 0.0
        assert res.seniority["ofc2"] == 8.0
        # Most junior now, despite the better badge
        assert [ro.id for ro in res.categorized.regular_officers] == ["ofc2", "ofc1"]

    def test_staffing_fetch_failure_degrades(self, sample_officers, sample_recurring):
        class NoStaffing(InMemoryRosterSource):
            def fetch_staffing_requirements(self, shift_id):
                raise RosterSourceError("staffing table unavailable")

        source = NoStaffing(officers=sample_officers, recurring=sample_recurring)
        res = resolve_schedule(source, "day", MONDAY, MONDAY, as_of=AS_OF)

        assert not res.staffing_by_date[MONDAY].has_requirement
        assert res.understaffed_dates() == []

    def test_recurring_fetch_failure_propagates(self):
        class Broken(InMemoryRosterSource):
            def fetch_recurring_assignments(self, shift_id, start, end):
                raise RosterSourceError("connection refused")

        with pytest.raises(RosterSourceError):
            resolve_schedule(Broken(), "day", MONDAY, MONDAY, as_of=AS_OF)


class TestBuildResolution:
    """Tests for the pure reducer."""

    def test_idempotent(self, sample_officers, sample_recurring, sample_requirements, vacation_exception):
        officers = {o.id: o for o in sample_officers}
        args = ("day", MONDAY, MONDAY + timedelta(days=9), sample_recurring, [vacation_exception])

        first = build_resolution(*args, requirements=sample_requirements, officers=officers, as_of=AS_OF)
        second = build_resolution(*args, requirements=sample_requirements, officers=officers, as_of=AS_OF)

        assert dict(first.per_date) == dict(second.per_date)
        assert first.categorized == second.categorized
        assert dict(first.staffing_by_date) == dict(second.staffing_by_date)

    def test_output_is_read_only(self, sample_recurring):
        res = build_resolution("day", MONDAY, MONDAY, sample_recurring, [], as_of=AS_OF)
        with pytest.raises(TypeError):
            res.per_date[MONDAY] = ()

    def test_empty_range(self):
        res = build_resolution("day", MONDAY, MONDAY - timedelta(days=1), [], [], as_of=AS_OF)
        assert dict(res.per_date) == {}
        assert len(res.categorized) == 0


class TestResolutionCache:
    """Staleness handling for overlapping requests."""

    def test_superseded_result_discarded(self, sample_recurring):
        cache = ResolutionCache()
        result = build_resolution("day", MONDAY, MONDAY, sample_recurring, [], as_of=AS_OF)
        older = cache.begin(("day", MONDAY, MONDAY))
        newer = cache.begin(("night", MONDAY, MONDAY))

        assert cache.complete(older, result) is False
        assert cache.get(("day", MONDAY, MONDAY)) is None
        assert cache.complete(newer, result) is True
        assert cache.get(("night", MONDAY, MONDAY)) is result

    def test_resolver_caches_by_request(self, sample_officers, sample_recurring):
        source = CountingSource(officers=sample_officers, recurring=sample_recurring)
        resolver = ScheduleResolver(source)

        first = resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF)
        second = resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF)
        resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF, refresh=True)

        assert first is second
        assert source.calls == ["exceptions", "exceptions"]

    def test_resolver_returns_none_when_superseded(self, sample_officers, sample_recurring):
        resolver = None

        class SlowSource(InMemoryRosterSource):
            def fetch_exceptions(self, shift_id, start, end):
                # A newer request arrives while this one is in flight
                resolver.cache.begin(("day", MONDAY, MONDAY + timedelta(days=1)))
                return super().fetch_exceptions(shift_id, start, end)

        resolver = ScheduleResolver(SlowSource(officers=sample_officers, recurring=sample_recurring))

        assert resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF) is None
        assert resolver.cache.get(("day", MONDAY, MONDAY)) is None

    def test_same_request_during_refresh_keeps_it_current(self, sample_officers, sample_recurring):
        key = ("day", MONDAY, MONDAY)
        resolver = None

        class RepeatSource(InMemoryRosterSource):
            def fetch_exceptions(self, shift_id, start, end):
                # The same range is requested again while the refresh is in flight
                resolver.cache.begin(key)
                return super().fetch_exceptions(shift_id, start, end)

        resolver = ScheduleResolver(RepeatSource(officers=sample_officers, recurring=sample_recurring))

        result = resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF, refresh=True)

        assert result is not None
        assert resolver.cache.get(key) is result

    def test_repeated_begin_keeps_ticket(self):
        cache = ResolutionCache()
        first = cache.begin(("day", MONDAY, MONDAY))

        assert cache.begin(("day", MONDAY, MONDAY)) == first
        assert cache.begin(("night", MONDAY, MONDAY)) != first

    def test_refresh_drops_cached_result(self, sample_officers, sample_recurring):
        key = ("day", MONDAY, MONDAY)
        resolver = None

        class SupersededSource(InMemoryRosterSource):
            refreshing = False

            def fetch_exceptions(self, shift_id, start, end):
                if self.refreshing:
                    resolver.cache.begin(("night", MONDAY, MONDAY))
                return super().fetch_exceptions(shift_id, start, end)

        source = SupersededSource(officers=sample_officers, recurring=sample_recurring)
        resolver = ScheduleResolver(source)
        assert resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF) is not None

        source.refreshing = True
        assert resolver.resolve("day", MONDAY, MONDAY, as_of=AS_OF, refresh=True) is None
        assert resolver.cache.get(key) is None
