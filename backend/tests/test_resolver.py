from __future__ import annotations

from typing import List, Optional

from app.api.schemas.timing import InteractionRule, ItemProfile, ScheduleInputItem, TimeWindow, TimingProfile
from app.services.timing import generate_schedule
from app.services.timing.constraint_builder import build_constraints
from app.services.timing.day_slots import get_default_day_slots
from app.services.timing.placer import place_items
from app.services.timing.profile_matcher import attach_profiles
from app.services.timing.resolver import resolve_schedule

DATE = "2024-05-01"


def _item(name: str) -> ScheduleInputItem:
    return ScheduleInputItem(canonical_name=name, display_name=name.title())


def _profile(name: str, windows: Optional[List[tuple]] = None, **timing) -> ItemProfile:
    return ItemProfile(
        canonical_name=name,
        display_name=name.title(),
        timing=TimingProfile(
            preferred_windows=[TimeWindow(start=start, end=end) for start, end in windows or []],
            **timing,
        ),
    )


def _separate(owner: str, other: str, minutes: int = 120, **kwargs) -> InteractionRule:
    return InteractionRule(
        rule_key=f"{owner}-vs-{other}",
        applies_to=[owner],
        constraint={"type": "MIN_SEPARATION_MINUTES", "minutes": minutes, "other": {"type": "name", "value": other}},
        **kwargs,
    )


def _times(schedule) -> dict:
    return {item.canonical_name: item.scheduled_time for item in schedule.items}


def test_movable_pair_shifts_later_item_later() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("alpha"), _item("beta")],
        [_profile("alpha", flexible=True), _profile("beta", flexible=True)],
        [_separate("alpha", "beta")],
        wake_time="07:00",
    )

    assert _times(schedule) == {"alpha": "09:00", "beta": "11:00"}
    assert schedule.warnings == []
    for item in schedule.items:
        assert item.constraints_satisfied == ["alpha-vs-beta"]


def test_movable_pair_shifts_earlier_item_when_later_is_capped() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("alpha"), _item("beta")],
        [_profile("alpha", flexible=True), _profile("beta", flexible=True, avoid_after_time="09:30")],
        [_separate("alpha", "beta")],
        wake_time="07:00",
    )

    assert _times(schedule) == {"alpha": "07:00", "beta": "09:00"}


def test_movable_item_moves_away_from_fixed_item() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("anchor"), _item("mover")],
        [_profile("anchor", windows=[("07:00", "09:00")]), _profile("mover", flexible=True)],
        [_separate("anchor", "mover")],
        wake_time="07:00",
    )

    assert _times(schedule) == {"anchor": "08:00", "mover": "10:00"}


def test_mover_falls_back_to_opposite_side() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("anchor"), _item("mover")],
        [_profile("anchor", windows=[("07:00", "09:00")]), _profile("mover", flexible=True, avoid_after_time="09:00")],
        [_separate("anchor", "mover")],
        wake_time="06:00",
    )

    assert _times(schedule) == {"anchor": "08:00", "mover": "06:00"}


def test_unresolvable_conflict_is_reported() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("alpha"), _item("beta")],
        [_profile("alpha", windows=[("07:00", "09:00")]), _profile("beta", windows=[("07:30", "08:30")])],
        [_separate("alpha", "beta", minutes=240, severity="hard", confidence=90)],
        wake_time="07:00",
    )

    assert len(schedule.warnings) == 1
    warning = schedule.warnings[0]
    assert warning.rule_key == "alpha-vs-beta"
    assert warning.severity == "hard"
    assert warning.confidence == 90
    assert warning.affected_items == ["Alpha", "Beta"]
    assert "at least 240 minutes apart" in warning.message
    for item in schedule.items:
        assert item.constraints_violated == ["alpha-vs-beta"]
        assert item.constraints_satisfied == []
    assert schedule.overall_confidence == 70


def test_relaxation_respects_pass_limit() -> None:
    items = [_item("alpha"), _item("beta")]
    profiles = [_profile("alpha", windows=[("07:00", "09:00")]), _profile("beta", windows=[("07:00", "09:00")])]
    slots = get_default_day_slots("07:00")
    matched = attach_profiles(items, profiles)
    build = build_constraints(matched, [_separate("alpha", "beta")])

    result = resolve_schedule(place_items(matched, slots), build, slots, max_passes=3)

    assert result.passes_run == 1
    assert result.binary_total == 1
    assert result.binary_satisfied == 0


def test_with_food_rule_snaps_to_nearest_meal() -> None:
    rule = InteractionRule(rule_key="needs-food", applies_to=["alpha"], constraint={"type": "WITH_FOOD_REQUIRED"})

    schedule = generate_schedule(
        DATE,
        [_item("alpha")],
        [_profile("alpha", windows=[("11:00", "14:00")])],
        [rule],
        wake_time="07:00",
    )

    item = schedule.items[0]
    assert item.scheduled_time == "12:00"
    assert item.with_food is True
    assert "Take with food" in item.notes
    assert item.constraints_satisfied == ["needs-food"]


def test_empty_stomach_rule_keeps_buffer_before_meal() -> None:
    rule = InteractionRule(
        rule_key="empty",
        applies_to=["alpha"],
        constraint={"type": "EMPTY_STOMACH_PREFERRED", "buffer_before_food_min": 30},
    )

    schedule = generate_schedule(
        DATE,
        [_item("alpha")],
        [_profile("alpha", windows=[("11:00", "13:00")], with_food=True)],
        [rule],
        wake_time="07:00",
    )

    item = schedule.items[0]
    assert item.scheduled_time == "11:30"
    assert item.with_food is False
    assert "Take on an empty stomach, 30 min before food" in item.notes


def test_avoid_after_rule_clamps_and_explains() -> None:
    rule = InteractionRule(rule_key="not-late", applies_to=["alpha"], constraint={"type": "AVOID_AFTER_TIME", "time": "14:00"})

    schedule = generate_schedule(
        DATE,
        [_item("alpha")],
        [_profile("alpha", windows=[("15:00", "17:00")])],
        [rule],
    )

    item = schedule.items[0]
    assert item.scheduled_time == "14:00"
    assert "Moved to 14:00 to avoid taking it late in the day" in item.notes
    assert item.constraints_satisfied == ["not-late"]


def test_unary_warn_rule_adds_note_and_warning() -> None:
    rule = InteractionRule(
        rule_key="heads-up",
        applies_to=["alpha"],
        constraint={"type": "WARN", "message": "Stay hydrated."},
        confidence=65,
    )

    schedule = generate_schedule(DATE, [_item("alpha")], [_profile("alpha", flexible=True)], [rule])

    assert schedule.items[0].notes == ["Stay hydrated."]
    assert [(w.rule_key, w.affected_items) for w in schedule.warnings] == [("heads-up", ["Alpha"])]


def test_stronger_separation_is_not_undone_by_weaker_rule() -> None:
    schedule = generate_schedule(
        DATE,
        [_item("mover"), _item("early"), _item("late")],
        [
            _profile("mover", flexible=True, avoid_after_time="11:00"),
            _profile("early", windows=[("07:00", "09:00")]),
            _profile("late", windows=[("09:30", "10:30")]),
        ],
        [
            _separate("mover", "late", confidence=40),
            _separate("mover", "early", confidence=90),
        ],
        wake_time="07:00",
    )

    assert _times(schedule) == {"mover": "10:00", "early": "08:00", "late": "10:00"}
    assert [warning.rule_key for warning in schedule.warnings] == ["mover-vs-late"]
    mover = next(item for item in schedule.items if item.canonical_name == "mover")
    assert mover.constraints_satisfied == ["mover-vs-early"]
    assert mover.constraints_violated == ["mover-vs-late"]


def _chain_result(max_passes: int):
    names = ["a", "b", "c", "d", "e"]
    slots = get_default_day_slots("07:00")
    matched = attach_profiles([_item(name) for name in names], [_profile(name, flexible=True) for name in names])
    rules = [_separate("d", "e", 60), _separate("c", "d", 60), _separate("b", "c", 60), _separate("a", "b", 60)]
    build = build_constraints(matched, rules)
    return resolve_schedule(place_items(matched, slots), build, slots, max_passes=max_passes)


def test_relaxation_stops_at_pass_limit_with_work_left() -> None:
    result = _chain_result(3)

    assert result.passes_run == 3
    assert [item.time_min for item in result.placed] == [540, 600, 660, 720, 720]
    assert result.binary_satisfied == 3
    assert [warning.rule_key for warning in result.warnings] == ["d-vs-e"]


def test_relaxation_settles_chain_with_enough_passes() -> None:
    result = _chain_result(5)

    assert result.passes_run == 5
    assert [item.time_min for item in result.placed] == [540, 600, 660, 720, 780]
    assert result.binary_satisfied == 4
    assert result.warnings == []


def test_with_food_item_only_moves_between_meals() -> None:
    rule = InteractionRule(rule_key="needs-food", applies_to=["mover"], constraint={"type": "WITH_FOOD_REQUIRED"})

    schedule = generate_schedule(
        DATE,
        [_item("anchor"), _item("mover")],
        [_profile("anchor", windows=[("07:00", "09:00")]), _profile("mover", flexible=True)],
        [rule, _separate("anchor", "mover")],
        wake_time="07:00",
    )

    times = _times(schedule)
    assert times == {"anchor": "08:00", "mover": "12:00"}
    mover = schedule.items[1]
    assert mover.with_food is True
    assert mover.constraints_satisfied == ["needs-food", "anchor-vs-mover"]


def test_clamped_with_food_item_reports_meal_rule_unmet() -> None:
    rules = [
        InteractionRule(rule_key="needs-food", applies_to=["alpha"], constraint={"type": "WITH_FOOD_REQUIRED"}),
        InteractionRule(rule_key="not-late", applies_to=["alpha"], constraint={"type": "AVOID_AFTER_TIME", "time": "14:00"}),
    ]

    schedule = generate_schedule(
        DATE,
        [_item("alpha")],
        [_profile("alpha", windows=[("17:00", "19:00")])],
        rules,
        wake_time="07:00",
    )

    item = schedule.items[0]
    assert item.scheduled_time == "14:00"
    assert item.slot_label == "afternoon"
    assert item.constraints_violated == ["needs-food"]
    assert item.constraints_satisfied == ["not-late"]


def test_empty_stomach_rule_replaces_profile_buffer_note() -> None:
    rule = InteractionRule(
        rule_key="empty",
        applies_to=["alpha"],
        constraint={"type": "EMPTY_STOMACH_PREFERRED", "buffer_before_food_min": 60},
    )

    schedule = generate_schedule(
        DATE,
        [_item("alpha")],
        [_profile("alpha", empty_stomach_preferred=True, buffer_before_food_min=45)],
        [rule],
        wake_time="07:00",
    )

    notes = schedule.items[0].notes
    assert notes == ["Take on an empty stomach, 60 min before food"]
