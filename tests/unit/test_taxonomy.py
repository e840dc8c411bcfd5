"""Tests for the event taxonomy tables."""

import pytest

from gamepad_bridge.taxonomy import (
    CODE_TABLES,
    SYMMETRIC_DOMAIN,
    UNIT_DOMAIN,
    AxisCode,
    ButtonCode,
    EventType,
    KeyboardCode,
    MouseButtonCode,
    TriggerCode,
    TriggerRange,
    codes_for,
    parse_event_code,
    parse_event_type,
    valid_events,
)


class TestEventType:
    """Test event categories."""

    def test_wire_names(self):
        assert [t.value for t in EventType] == [
            "button",
            "axis",
            "trigger",
            "mouseButton",
            "keyboard",
        ]

    def test_discrete_and_continuous(self):
        """Buttons, mouse buttons and keys are discrete; axes and triggers are not."""
        assert {t for t in EventType if t.is_discrete} == {
            EventType.BUTTON,
            EventType.MOUSE_BUTTON,
            EventType.KEYBOARD,
        }
        assert {t for t in EventType if t.is_continuous} == {EventType.AXIS, EventType.TRIGGER}

    def test_every_type_has_a_code_table(self):
        assert set(CODE_TABLES) == set(EventType)

    def test_parse_event_type_is_case_sensitive(self):
        assert parse_event_type("mouseButton") is EventType.MOUSE_BUTTON
        assert parse_event_type("MouseButton") is None
        assert parse_event_type("joystick") is None


class TestCodeTables:
    """Test the per-type code enumerations."""

    def test_table_sizes(self):
        assert len(ButtonCode) == 23
        assert len(AxisCode) == 6
        assert len(TriggerCode) == 2
        assert len(MouseButtonCode) == 3
        assert len(KeyboardCode) == 80

    def test_axis_codes(self):
        assert codes_for(EventType.AXIS) == [
            "leftX",
            "leftY",
            "rightX",
            "rightY",
            "dpadHorz",
            "dpadVert",
        ]

    @pytest.mark.parametrize(
        "code",
        ["a", "z", "0", "9", "numpad_0", "numpad_9", "pageup", "f1", "f12", "space", "fn"],
    )
    def test_keyboard_codes(self, code):
        assert parse_event_code(EventType.KEYBOARD, code) is not None

    def test_keyboard_letters_are_lowercase(self):
        assert parse_event_code(EventType.KEYBOARD, "A") is None

    @pytest.mark.parametrize(
        "event_type,code",
        [
            (EventType.AXIS, "A"),
            (EventType.BUTTON, "leftX"),
            (EventType.TRIGGER, "leftX"),
            (EventType.MOUSE_BUTTON, "A"),
            (EventType.KEYBOARD, "leftClick"),
        ],
    )
    def test_codes_do_not_cross_tables(self, event_type, code):
        """A code is only legal under the type whose table lists it."""
        assert parse_event_code(event_type, code) is None


class TestValueDomains:
    """Test continuous value intervals."""

    def test_symmetric_bounds_are_inclusive(self):
        assert SYMMETRIC_DOMAIN.contains(-1)
        assert SYMMETRIC_DOMAIN.contains(1.0)
        assert not SYMMETRIC_DOMAIN.contains(1.0001)
        assert not SYMMETRIC_DOMAIN.contains(-1.0001)

    def test_nan_is_outside_every_domain(self):
        assert not SYMMETRIC_DOMAIN.contains(float("nan"))
        assert not UNIT_DOMAIN.contains(float("nan"))

    def test_trigger_range_domains(self):
        assert TriggerRange.SYMMETRIC.domain is SYMMETRIC_DOMAIN
        assert TriggerRange.UNIT.domain is UNIT_DOMAIN
        assert not UNIT_DOMAIN.contains(-0.5)

    def test_describe(self):
        assert SYMMETRIC_DOMAIN.describe() == "between -1 and 1"
        assert UNIT_DOMAIN.describe() == "between 0 and 1"


class TestValidEventsListing:
    """Test the listing served as the valid-events resource."""

    def test_groups(self):
        listing = valid_events()
        assert set(listing) == {"buttonEvents", "sliderEvents"}

    def test_slider_events_cover_axes_and_triggers(self):
        sliders = valid_events()["sliderEvents"]
        assert len(sliders) == 8
        assert {"type": "trigger", "code": "rightTrigger"} in sliders
        assert {e["type"] for e in sliders} == {"axis", "trigger"}

    def test_button_events_cover_discrete_types(self):
        buttons = valid_events()["buttonEvents"]
        assert len(buttons) == 23 + 3 + 80
        assert {"type": "mouseButton", "code": "middleClick"} in buttons
        assert {"type": "keyboard", "code": "0"} in buttons

    def test_entries_are_type_code_pairs(self):
        for group in valid_events().values():
            for entry in group:
                assert set(entry) == {"type", "code"}
