"""Tests for day-level booking rules and slot-list generation."""

import datetime

import pytest

from showbook.config import BookingRules
from showbook.schemas.booking_schema import BookingStatus, PackageType
from showbook.scheduling.availability import (
    REASON_HALF_DAY_LOCK,
    REASON_HALF_DAY_NEEDS_FREE_DAY,
    REASON_MAX_BOOKINGS,
    generate_time_slots,
    get_bookings_for_date,
    has_half_day_booking,
    is_time_slot_available,
)
from tests.conftest import SHOW_DATE, make_booking

ALL_SLOTS = [
    "08:00 AM",
    "09:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "01:00 PM",
    "02:00 PM",
    "03:00 PM",
    "04:00 PM",
]


class TestOccupancy:
    def test_filters_by_exact_date(self):
        bookings = [
            make_booking(date=SHOW_DATE),
            make_booking(date=SHOW_DATE + datetime.timedelta(days=1)),
        ]
        assert len(get_bookings_for_date(bookings, SHOW_DATE)) == 1

    def test_accepts_iso_string(self):
        bookings = [make_booking()]
        assert len(get_bookings_for_date(bookings, "2025-06-10")) == 1

    def test_excludes_cancelled(self):
        bookings = [
            make_booking(status=BookingStatus.CANCELLED),
            make_booking(time_slot="01:00 PM", status=BookingStatus.PENDING),
        ]
        result = get_bookings_for_date(bookings, SHOW_DATE)
        assert [b.time_slot for b in result] == ["01:00 PM"]

    def test_rejected_still_occupies(self):
        bookings = [make_booking(status=BookingStatus.REJECTED)]
        assert len(get_bookings_for_date(bookings, SHOW_DATE)) == 1

    def test_half_day_detected(self):
        bookings = [make_booking(package_type=PackageType.HALFDAY)]
        assert has_half_day_booking(bookings, SHOW_DATE)

    def test_cancelled_half_day_ignored(self):
        bookings = [
            make_booking(package_type=PackageType.HALFDAY, status=BookingStatus.CANCELLED)
        ]
        assert not has_half_day_booking(bookings, SHOW_DATE)

    def test_half_day_on_other_date_ignored(self):
        bookings = [
            make_booking(
                package_type=PackageType.HALFDAY,
                date=SHOW_DATE + datetime.timedelta(days=1),
            )
        ]
        assert not has_half_day_booking(bookings, SHOW_DATE)


class TestHalfDayExclusivity:
    @pytest.mark.parametrize("package", list(PackageType))
    def test_half_day_blocks_every_package(self, rules, package):
        bookings = [make_booking(package_type=PackageType.HALFDAY)]
        for hour_label in ALL_SLOTS:
            result = is_time_slot_available(
                bookings, SHOW_DATE, hour_label, package, rules=rules
            )
            assert result.available is False
            assert result.reason == REASON_HALF_DAY_LOCK

    @pytest.mark.parametrize("package", list(PackageType))
    def test_any_booking_blocks_half_day_request(self, rules, package):
        bookings = [make_booking(time_slot="08:00 AM", package_type=package)]
        if package == PackageType.HALFDAY:
            expected = REASON_HALF_DAY_LOCK
        else:
            expected = REASON_HALF_DAY_NEEDS_FREE_DAY
        result = is_time_slot_available(
            bookings, SHOW_DATE, "02:00 PM", PackageType.HALFDAY, rules=rules
        )
        assert result.available is False
        assert result.reason == expected

    def test_half_day_on_empty_day_available(self, rules):
        result = is_time_slot_available([], SHOW_DATE, "09:00 AM", "halfday", rules=rules)
        assert result.available is True
        assert result.reason is None

    @pytest.mark.parametrize("package", [PackageType.CLASSIC, PackageType.PRESCHOOL])
    def test_cancelled_booking_does_not_block_half_day(self, rules, package):
        bookings = [make_booking(package_type=package, status=BookingStatus.CANCELLED)]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "09:00 AM", PackageType.HALFDAY, rules=rules
        )
        assert result.available is True
        assert generate_time_slots(bookings, SHOW_DATE, "halfday", rules=rules) == ALL_SLOTS

    def test_preschool_on_half_day_date(self, rules):
        bookings = [make_booking(time_slot="09:00 AM", package_type=PackageType.HALFDAY)]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "03:00 PM", PackageType.PRESCHOOL, rules=rules
        )
        assert result.available is False
        assert result.reason == "Date blocked by half-day booking"


class TestDailyCapacity:
    def test_fourth_classic_rejected(self, rules):
        bookings = [
            make_booking(time_slot="08:00 AM"),
            make_booking(time_slot="11:00 AM"),
            make_booking(time_slot="02:00 PM"),
        ]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "04:00 PM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is False
        assert result.reason == REASON_MAX_BOOKINGS

    def test_third_classic_allowed(self, rules):
        bookings = [
            make_booking(time_slot="08:00 AM"),
            make_booking(time_slot="11:00 AM"),
        ]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "02:00 PM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is True

    def test_cancelled_does_not_count(self, rules):
        bookings = [
            make_booking(time_slot="08:00 AM"),
            make_booking(time_slot="11:00 AM"),
            make_booking(time_slot="02:00 PM", status=BookingStatus.CANCELLED),
        ]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "02:00 PM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is True

    def test_custom_capacity(self):
        tight = BookingRules(
            max_bookings_per_day=1, buffer_hours=2, operating_start=8, operating_end=16
        )
        bookings = [make_booking(time_slot="08:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "03:00 PM", PackageType.PRESCHOOL, rules=tight
        )
        assert result.reason == REASON_MAX_BOOKINGS


class TestBuffer:
    def test_one_hour_gap_blocked(self, rules):
        bookings = [make_booking(time_slot="11:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "12:00 PM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is False
        assert result.reason == "Requires 2-hour buffer between shows"

    def test_same_hour_blocked(self, rules):
        bookings = [make_booking(time_slot="11:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "11:00 AM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is False

    def test_two_hour_gap_allowed(self, rules):
        bookings = [make_booking(time_slot="11:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "01:00 PM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is True

    def test_gap_before_existing_show(self, rules):
        bookings = [make_booking(time_slot="11:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "10:00 AM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is False

    def test_cancelled_does_not_trigger_buffer(self, rules):
        bookings = [make_booking(time_slot="11:00 AM", status=BookingStatus.CANCELLED)]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "11:00 AM", PackageType.CLASSIC, rules=rules
        )
        assert result.available is True

    def test_same_customer_same_address_exempt(self, rules):
        bookings = [
            make_booking(
                time_slot="11:00 AM",
                email="carol@school.ae",
                address="Park Towers, Dubai",
            )
        ]
        result = is_time_slot_available(
            bookings,
            SHOW_DATE,
            "12:00 PM",
            PackageType.CLASSIC,
            "CAROL@school.ae",
            "park towers, dubai",
            rules=rules,
        )
        assert result.available is True

    def test_same_customer_different_address_blocked(self, rules):
        bookings = [
            make_booking(
                time_slot="11:00 AM",
                email="carol@school.ae",
                address="Park Towers, Dubai",
            )
        ]
        result = is_time_slot_available(
            bookings,
            SHOW_DATE,
            "12:00 PM",
            PackageType.CLASSIC,
            "carol@school.ae",
            "Marina Walk, Dubai",
            rules=rules,
        )
        assert result.available is False

    def test_missing_requester_address_blocked(self, rules):
        bookings = [
            make_booking(
                time_slot="11:00 AM",
                email="carol@school.ae",
                address="Park Towers, Dubai",
            )
        ]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "12:00 PM", PackageType.CLASSIC, "carol@school.ae",
            rules=rules,
        )
        assert result.available is False

    def test_exemption_is_pairwise(self, rules):
        bookings = [
            make_booking(time_slot="09:00 AM", email="alice@x.com", address="123 Main St"),
            make_booking(time_slot="10:00 AM", email="bob@y.com", address="456 Oak Ave"),
        ]
        result = is_time_slot_available(
            bookings,
            SHOW_DATE,
            "10:00 AM",
            PackageType.CLASSIC,
            "alice@x.com",
            "123 Main St",
            rules=rules,
        )
        assert result.available is False
        assert "buffer" in result.reason

    def test_custom_buffer(self):
        relaxed = BookingRules(
            max_bookings_per_day=3, buffer_hours=1, operating_start=8, operating_end=16
        )
        bookings = [make_booking(time_slot="11:00 AM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "12:00 PM", PackageType.CLASSIC, rules=relaxed
        )
        assert result.available is True


class TestOperatingHours:
    def test_before_opening(self, rules):
        result = is_time_slot_available([], SHOW_DATE, "07:00 AM", "classic", rules=rules)
        assert result.available is False
        assert result.reason == "Operating hours: 08:00 AM - 04:00 PM"

    def test_after_last_start(self, rules):
        result = is_time_slot_available([], SHOW_DATE, "05:00 PM", "classic", rules=rules)
        assert result.available is False

    def test_window_edges_inclusive(self, rules):
        for label in ("08:00 AM", "04:00 PM"):
            assert is_time_slot_available([], SHOW_DATE, label, "classic", rules=rules).available

    def test_unparseable_label_falls_outside_window(self, rules):
        result = is_time_slot_available([], SHOW_DATE, "whenever", "classic", rules=rules)
        assert result.available is False
        assert result.reason.startswith("Operating hours")

    def test_buffer_checked_before_hours(self, rules):
        bookings = [make_booking(time_slot="04:00 PM")]
        result = is_time_slot_available(
            bookings, SHOW_DATE, "05:00 PM", "classic", rules=rules
        )
        assert "buffer" in result.reason


class TestPackageBoundary:
    def test_unknown_package_rejected(self, rules):
        with pytest.raises(ValueError):
            is_time_slot_available([], SHOW_DATE, "09:00 AM", "birthday", rules=rules)


class TestScenarios:
    @pytest.fixture
    def carol_booking(self):
        return [
            make_booking(
                time_slot="11:00 AM",
                email="carol@school.ae",
                address="Park Towers, Dubai",
            )
        ]

    def test_one_hour_gap_other_customer(self, rules, carol_booking):
        result = is_time_slot_available(
            carol_booking, "2025-06-10", "12:00 PM", "classic",
            "dan@nursery.ae", "Marina Walk, Dubai", rules=rules,
        )
        assert result.available is False
        assert "buffer" in result.reason

    def test_two_hour_gap(self, rules, carol_booking):
        result = is_time_slot_available(
            carol_booking, "2025-06-10", "01:00 PM", "classic", rules=rules
        )
        assert result.available is True

    def test_same_customer_and_venue(self, rules, carol_booking):
        result = is_time_slot_available(
            carol_booking, "2025-06-10", "12:00 PM", "classic",
            "carol@school.ae", "Park Towers, Dubai", rules=rules,
        )
        assert result.available is True


class TestGenerateTimeSlots:
    def test_empty_day_returns_full_window(self, rules):
        slots = generate_time_slots([], SHOW_DATE, PackageType.CLASSIC, rules=rules)
        assert slots == ALL_SLOTS
        assert len(set(slots)) == len(slots)

    def test_half_day_lock_returns_empty(self, rules):
        bookings = [make_booking(package_type=PackageType.HALFDAY)]
        assert generate_time_slots(bookings, SHOW_DATE, PackageType.CLASSIC, rules=rules) == []

    def test_half_day_request_on_busy_day_returns_empty(self, rules):
        bookings = [make_booking(time_slot="09:00 AM")]
        assert generate_time_slots(bookings, SHOW_DATE, PackageType.HALFDAY, rules=rules) == []

    def test_half_day_request_on_empty_day(self, rules):
        assert generate_time_slots([], SHOW_DATE, "halfday", rules=rules) == ALL_SLOTS

    def test_buffer_removes_neighbours(self, rules):
        bookings = [make_booking(time_slot="11:00 AM")]
        slots = generate_time_slots(bookings, SHOW_DATE, PackageType.CLASSIC, rules=rules)
        assert slots == [
            "08:00 AM",
            "09:00 AM",
            "01:00 PM",
            "02:00 PM",
            "03:00 PM",
            "04:00 PM",
        ]

    def test_same_party_keeps_neighbours(self, rules):
        bookings = [
            make_booking(
                time_slot="11:00 AM",
                email="carol@school.ae",
                address="Park Towers, Dubai",
            )
        ]
        slots = generate_time_slots(
            bookings, SHOW_DATE, "classic", "carol@school.ae", "Park Towers, Dubai",
            rules=rules,
        )
        assert slots == ALL_SLOTS

    def test_full_day_returns_empty(self, rules):
        bookings = [
            make_booking(time_slot="08:00 AM"),
            make_booking(time_slot="11:00 AM"),
            make_booking(time_slot="02:00 PM"),
        ]
        assert generate_time_slots(bookings, SHOW_DATE, "preschool", rules=rules) == []

    def test_ascending_order(self, rules):
        bookings = [make_booking(time_slot="12:00 PM")]
        slots = generate_time_slots(bookings, SHOW_DATE, "classic", rules=rules)
        hours = [ALL_SLOTS.index(s) for s in slots]
        assert hours == sorted(hours)

    def test_accepts_generator_input(self, rules):
        bookings = (b for b in [make_booking(time_slot="11:00 AM")])
        slots = generate_time_slots(bookings, SHOW_DATE, "classic", rules=rules)
        assert "12:00 PM" not in slots
        assert "01:00 PM" in slots
