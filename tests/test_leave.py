"""Leave module tests — conflict rules, submission validation, optional
holidays, day maps and the approval capability.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

import pytest

from hrms_engine.common.constants import DayType, HolidayType
from hrms_engine.common.exceptions import ValidationException
from hrms_engine.leave.approval import approve, is_approved, revoke_approval
from hrms_engine.leave.schemas import LeaveEntry, LeaveSubmission
from hrms_engine.leave.service import (
    build_day_map,
    check_batch,
    claimed_dates,
    count_optional_holidays_taken,
    find_conflicts,
    optional_holiday_delta,
    optional_holiday_usage,
    validate_submission,
)
from tests.conftest import _make_entry, _make_holiday, _make_policy, _make_record


L, W, P = DayType.leave, DayType.wfh, DayType.present

CHRISTMAS = _make_holiday(date(2024, 12, 25), name="Christmas")
DUSSEHRA_OPT = _make_holiday(date(2024, 10, 11), name="Dussehra", type=HolidayType.optional)
DIWALI_OPT = _make_holiday(date(2024, 11, 1), name="Diwali", type=HolidayType.optional)


# ── Conflicts ───────────────────────────────────────────────────────


class TestFindConflicts:

    def test_existing_leave_conflicts_with_new_wfh(self):
        existing = [_make_record({date(2024, 3, 15): L}, id="r1")]
        conflicts = find_conflicts({date(2024, 3, 15): W}, existing, [])
        assert conflicts == [date(2024, 3, 15)]

    def test_range_date_tagged_present_conflicts(self):
        existing = [_make_record({date(2024, 3, 15): L}, id="r1")]
        days = {date(2024, 3, 14): W, date(2024, 3, 15): P}
        conflicts = find_conflicts(
            days, existing, [],
            start_date=date(2024, 3, 14), end_date=date(2024, 3, 15),
        )
        assert conflicts == [date(2024, 3, 15)]

    def test_range_date_left_out_of_day_map_conflicts(self):
        existing = [_make_record({date(2024, 3, 13): W}, id="r1")]
        conflicts = find_conflicts(
            {date(2024, 3, 12): L, date(2024, 3, 14): L}, existing, [],
            start_date=date(2024, 3, 12), end_date=date(2024, 3, 14),
        )
        assert conflicts == [date(2024, 3, 13)]

    def test_range_skips_weekends_and_holidays(self):
        existing = [_make_record({
            date(2024, 12, 21): L, date(2024, 12, 25): L, date(2024, 12, 24): P,
        })]
        conflicts = find_conflicts(
            {}, existing, [CHRISTMAS],
            start_date=date(2024, 12, 20), end_date=date(2024, 12, 27),
        )
        assert conflicts == []

    def test_existing_present_does_not_block(self):
        existing = [_make_record({date(2024, 3, 15): P})]
        assert find_conflicts({date(2024, 3, 15): L}, existing, []) == []

    def test_holidays_and_weekends_not_reported(self):
        days = {date(2024, 12, 25): L, date(2024, 12, 28): L, date(2024, 12, 26): L}
        assert find_conflicts(days, [], [CHRISTMAS]) == []

    def test_results_sorted(self):
        existing = [_make_record({
            date(2024, 3, 13): L, date(2024, 3, 11): W, date(2024, 3, 12): L,
        })]
        days = {date(2024, 3, 13): L, date(2024, 3, 11): L}
        assert find_conflicts(days, existing, []) == [date(2024, 3, 11), date(2024, 3, 13)]

    def test_claimed_dates(self):
        days = {date(2024, 3, 11): L, date(2024, 3, 12): W, date(2024, 3, 13): P}
        assert claimed_dates(days) == {date(2024, 3, 11), date(2024, 3, 12)}


class TestCheckBatch:

    def test_later_entry_flagged(self):
        a = _make_entry({date(2024, 4, 1): L, date(2024, 4, 2): L})
        b = _make_entry({date(2024, 4, 2): W})
        report = check_batch([a, b], [], [])
        assert report.has_conflict is True
        assert [(e.index, e.dates) for e in report.entries] == [(1, [date(2024, 4, 2)])]

    def test_reordering_flags_the_other_entry(self):
        a = _make_entry({date(2024, 4, 1): L, date(2024, 4, 2): L})
        b = _make_entry({date(2024, 4, 2): W})
        report = check_batch([b, a], [], [])
        assert [(e.index, e.dates) for e in report.entries] == [(1, [date(2024, 4, 2)])]

    def test_later_range_covering_earlier_date_flagged(self):
        a = _make_entry({date(2024, 4, 3): L})
        b = _make_entry(
            {date(2024, 4, 2): W, date(2024, 4, 4): W},
            start_date=date(2024, 4, 2),
            end_date=date(2024, 4, 4),
        )
        report = check_batch([a, b], [], [])
        assert [(e.index, e.dates) for e in report.entries] == [(1, [date(2024, 4, 3)])]

    def test_earlier_range_claims_untagged_dates(self):
        a = _make_entry(
            {date(2024, 4, 1): L},
            start_date=date(2024, 4, 1),
            end_date=date(2024, 4, 2),
        )
        b = _make_entry({date(2024, 4, 2): W})
        report = check_batch([a, b], [], [])
        assert [(e.index, e.dates) for e in report.entries] == [(1, [date(2024, 4, 2)])]

    def test_no_conflicts(self):
        report = check_batch([_make_entry({date(2024, 4, 1): L})], [], [])
        assert report.has_conflict is False
        assert report.as_error_map() == {}


class TestValidateSubmission:

    def test_valid_submission(self):
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[_make_entry({date(2024, 3, 18): L})],
        )
        check = validate_submission(submission, [], [])
        assert check.ok is True
        assert check.errors == {}

    def test_missing_employee_and_entries(self):
        check = validate_submission(LeaveSubmission(employee_id="  "), [], [])
        assert check.ok is False
        assert check.errors["employee_id"] == ["Please select a valid employee."]
        assert check.errors["entries"] == ["Please add at least one leave entry."]

    def test_missing_range_and_empty_days(self):
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[
                LeaveEntry(days={date(2024, 3, 18): L}),
                LeaveEntry(start_date=date(2024, 3, 18), end_date=date(2024, 3, 19)),
            ],
        )
        check = validate_submission(submission, [], [])
        assert check.errors["entries.0.date_range"] == ["Please select a valid date range."]
        assert check.errors["entries.1.days"] == ["Please select at least one day."]

    def test_conflict_reported_with_dates(self):
        existing = [_make_record({date(2024, 3, 15): L}, id="r1")]
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[_make_entry({date(2024, 3, 15): W})],
        )
        check = validate_submission(submission, existing, [])
        assert check.ok is False
        assert check.errors["entries.0.dates"] == ["Conflicting dates: 2024-03-15"]
        assert check.conflicts.as_error_map() == {"entries.0": [date(2024, 3, 15)]}

    def test_range_over_booked_leave_refused(self):
        existing = [_make_record({date(2024, 3, 15): L}, id="r1")]
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[_make_entry({date(2024, 3, 14): W, date(2024, 3, 15): P})],
        )
        check = validate_submission(submission, existing, [])
        assert check.ok is False
        assert check.errors["entries.0.dates"] == ["Conflicting dates: 2024-03-15"]

    def test_other_employees_records_ignored(self):
        existing = [_make_record({date(2024, 3, 15): L}, employee_id="EMP-0002")]
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[_make_entry({date(2024, 3, 15): L})],
        )
        assert validate_submission(submission, existing, []).ok is True

    def test_edit_excludes_record_being_edited(self):
        existing = [_make_record({date(2024, 3, 15): L}, id="r1")]
        submission = LeaveSubmission(
            employee_id="EMP-0001",
            entries=[_make_entry({date(2024, 3, 15): W})],
            exclude_record_id="r1",
        )
        assert validate_submission(submission, existing, []).ok is True

    def test_days_outside_range_checked_with_warning(self, caplog):
        existing = [_make_record({date(2024, 3, 20): L})]
        entry = LeaveEntry(
            start_date=date(2024, 3, 18),
            end_date=date(2024, 3, 19),
            days={date(2024, 3, 18): L, date(2024, 3, 20): L},
        )
        submission = LeaveSubmission(employee_id="EMP-0001", entries=[entry])
        with caplog.at_level(logging.WARNING):
            check = validate_submission(submission, existing, [])
        assert "outside" in caplog.text
        assert check.conflicts.entries[0].dates == [date(2024, 3, 20)]

    def test_overlong_range_refused(self):
        entry = LeaveEntry(
            start_date=date(2024, 1, 1),
            end_date=date(2025, 6, 1),
            days={date(2024, 1, 2): L},
        )
        submission = LeaveSubmission(employee_id="EMP-0001", entries=[entry])
        check = validate_submission(submission, [], [])
        assert "entries.0.date_range" in check.errors


# ── Day maps ────────────────────────────────────────────────────────


class TestBuildDayMap:

    def test_skips_weekends_and_mandatory_holidays(self):
        days = build_day_map(date(2024, 12, 23), date(2024, 12, 29), [CHRISTMAS])
        assert sorted(days) == [
            date(2024, 12, 23), date(2024, 12, 24), date(2024, 12, 26), date(2024, 12, 27),
        ]
        assert set(days.values()) == {L}

    def test_keeps_optional_holidays_and_default(self):
        days = build_day_map(date(2024, 11, 1), date(2024, 11, 1), [DIWALI_OPT], default=W)
        assert days == {date(2024, 11, 1): W}


# ── Optional holidays ───────────────────────────────────────────────


class TestOptionalHolidays:

    HOLIDAYS = [CHRISTMAS, DUSSEHRA_OPT, DIWALI_OPT]

    def test_only_leave_consumes(self):
        days = {date(2024, 10, 11): L, date(2024, 11, 1): W, date(2024, 11, 4): L}
        assert count_optional_holidays_taken(days, self.HOLIDAYS) == 1

    def test_delta_on_create(self):
        count, delta = optional_holiday_delta(None, {date(2024, 10, 11): L}, self.HOLIDAYS)
        assert (count, delta) == (1, 1)

    def test_delta_on_update(self):
        previous = _make_record(
            {date(2024, 10, 11): L, date(2024, 11, 1): L}, optional_holidays_taken=2,
        )
        count, delta = optional_holiday_delta(
            previous, {date(2024, 10, 11): L, date(2024, 11, 1): W}, self.HOLIDAYS,
        )
        assert (count, delta) == (1, -1)

    def test_delta_on_delete(self):
        previous = _make_record({date(2024, 10, 11): L}, optional_holidays_taken=1)
        assert optional_holiday_delta(previous, None, self.HOLIDAYS) == (0, -1)

    def test_usage_against_cap(self):
        policy = _make_policy(optional_holidays_yearly=1, holidays=self.HOLIDAYS)
        records = [
            _make_record({date(2024, 10, 11): L}),
            _make_record({date(2024, 10, 11): L, date(2024, 11, 1): L}),
            _make_record({date(2023, 11, 1): L}),
        ]
        usage = optional_holiday_usage(records, 2024, policy)
        assert usage.taken == 2
        assert usage.remaining == -1
        assert usage.is_over_limit is True

    def test_usage_without_cap(self):
        policy = _make_policy(optional_holidays_yearly=None, holidays=self.HOLIDAYS)
        usage = optional_holiday_usage([_make_record({date(2024, 10, 11): L})], 2024, policy)
        assert usage.taken == 1
        assert usage.cap is None
        assert usage.is_over_limit is False


# ── Approval ────────────────────────────────────────────────────────


class TestApproval:

    AT = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_approve_returns_copy(self):
        record = _make_record({date(2024, 3, 15): L}, id="r1")
        approved = approve(record, "hr@example.com", self.AT)
        assert is_approved(approved) is True
        assert is_approved(record) is False
        assert approved.approval.approved_by == "hr@example.com"

    def test_double_approval_refused(self):
        approved = approve(_make_record({date(2024, 3, 15): L}), "hr", self.AT)
        with pytest.raises(ValidationException) as exc_info:
            approve(approved, "someone-else", self.AT)
        assert "approval" in exc_info.value.errors

    def test_blank_approver_refused(self):
        with pytest.raises(ValidationException):
            approve(_make_record({date(2024, 3, 15): L}), "   ", self.AT)

    def test_revoke(self):
        approved = approve(_make_record({date(2024, 3, 15): L}), "hr", self.AT)
        assert is_approved(revoke_approval(approved)) is False
