"""
Tests for the volume contribution aggregator.

Values are hand-computed: amount = volume * share / 100, and a specific
slice's fraction is its amount over its group's amount.
"""

import pytest

from muscle_share.core.aggregation import (
    build,
    build_for_workout,
    resolve_named_shares,
)
from muscle_share.core.models import (
    Catalog,
    Exercise,
    MajorContribution,
    MuscleGroup,
    SetEntry,
    SpecificContribution,
    SpecificMuscle,
    WorkoutRecord,
)


def _catalog() -> Catalog:
    return Catalog(
        groups=[MuscleGroup("Chest", id="chest"), MuscleGroup("Triceps", id="triceps")],
        muscles=[
            SpecificMuscle("PecMajor", group_id="chest", id="pec-major"),
            SpecificMuscle("PecMinor", group_id="chest", id="pec-minor"),
        ],
    )


def _exercise(specifics=(("pec-major", 54), ("pec-minor", 6))) -> Exercise:
    return Exercise(
        name="Bench Press",
        date_added="2026-02-01",
        major_contributions=[MajorContribution("chest", 60), MajorContribution("triceps", 40)],
        specific_contributions=[SpecificContribution(m, s) for m, s in specifics],
    )


class TestBuild:
    def test_end_to_end(self):
        result = build(
            {"Chest": 60, "Triceps": 40},
            {"Chest": {"PecMajor": 54, "PecMinor": 6}},
            1000,
        )
        assert result is not None
        assert result.total_volume == 1000
        assert [s.name for s in result.major_slices] == ["Chest", "Triceps"]
        assert result.major_slices[0].amount == pytest.approx(600)
        assert result.major_slices[0].fraction == pytest.approx(0.6)
        assert result.major_slices[1].amount == pytest.approx(400)
        assert result.major_slices[1].fraction == pytest.approx(0.4)

        assert len(result.specific_groups) == 1
        chest = result.specific_groups[0]
        assert chest.group_name == "Chest"
        assert chest.group_share == 60
        assert chest.group_amount == pytest.approx(600)
        assert [s.name for s in chest.slices] == ["PecMajor", "PecMinor"]
        assert chest.slices[0].amount == pytest.approx(540)
        assert chest.slices[0].fraction == pytest.approx(0.9)
        assert chest.slices[1].amount == pytest.approx(60)
        assert chest.slices[1].fraction == pytest.approx(0.1)

    @pytest.mark.parametrize("volume", [0, 0.0, -10])
    def test_no_volume_gives_none(self, volume):
        assert build({"Chest": 100}, {"Chest": {"PecMajor": 100}}, volume) is None

    def test_no_positive_share_gives_none(self):
        assert build({}, {}, 500) is None
        assert build({"Chest": 0}, {}, 500) is None

    def test_equal_amounts_sorted_by_name(self):
        result = build({"Triceps": 50, "Chest": 50}, {}, 200)
        assert [s.name for s in result.major_slices] == ["Chest", "Triceps"]

    def test_specific_groups_sorted_by_group_amount(self):
        result = build(
            {"Chest": 30, "Back": 70},
            {"Chest": {"PecMajor": 30}, "Back": {"Lats": 40, "Traps": 30}},
            100,
        )
        assert [g.group_name for g in result.specific_groups] == ["Back", "Chest"]
        assert [s.name for s in result.specific_groups[0].slices] == ["Lats", "Traps"]

    def test_fraction_is_clamped(self):
        # Stale data: specific share above its group's share
        result = build({"Chest": 50}, {"Chest": {"PecMajor": 60}}, 100)
        assert result.specific_groups[0].slices[0].fraction == 1.0

    def test_specifics_of_unselected_group_are_ignored(self):
        result = build({"Chest": 100}, {"Shoulders": {"AntDelt": 20}}, 100)
        assert result.specific_groups == []

    def test_measurement_is_carried_through(self):
        result = build({"Chest": 100}, {}, 100, measurement="mixed")
        assert result.measurement == "mixed"


class TestResolveNamedShares:
    def test_resolves_names(self):
        majors, specifics = resolve_named_shares(_exercise(), _catalog())
        assert majors == {"Chest": 60, "Triceps": 40}
        assert specifics == {"Chest": {"PecMajor": 54, "PecMinor": 6}}

    def test_dangling_muscle_is_skipped(self):
        ex = _exercise(specifics=(("pec-major", 54), ("deleted-muscle", 6)))
        _, specifics = resolve_named_shares(ex, _catalog())
        assert specifics == {"Chest": {"PecMajor": 54}}

    def test_dangling_group_is_skipped(self):
        cat = _catalog()
        cat.groups = [g for g in cat.groups if g.id != "triceps"]
        majors, _ = resolve_named_shares(_exercise(), cat)
        assert majors == {"Chest": 60}


class TestBuildForWorkout:
    def test_dangling_reference_does_not_affect_other_slices(self):
        ex = _exercise(specifics=(("pec-major", 54), ("deleted-muscle", 6)))
        workout = WorkoutRecord(date="2026-02-03", sets=[SetEntry(reps=10, weight=100)])
        result = build_for_workout(ex, workout, _catalog())

        assert result.total_volume == pytest.approx(1000)
        chest = result.specific_groups[0]
        assert [s.name for s in chest.slices] == ["PecMajor"]
        assert chest.slices[0].amount == pytest.approx(540)
        assert chest.slices[0].fraction == pytest.approx(0.9)

    def test_measurement_from_sets(self):
        workout = WorkoutRecord(
            date="2026-02-03",
            sets=[SetEntry(reps=5, weight=100), SetEntry(reps=12)],
        )
        result = build_for_workout(_exercise(), workout, _catalog())
        assert result.measurement == "mixed"
        # 5 x 100 + 12 bodyweight reps
        assert result.total_volume == pytest.approx(512)

    def test_bodyweight_workout_counts_reps(self):
        cat = Catalog(groups=[MuscleGroup("Back", id="back")])
        pull_up = Exercise(
            name="Pull-Up",
            date_added="2026-02-01",
            major_contributions=[MajorContribution("back", 100)],
        )
        workout = WorkoutRecord(date="2026-02-03", sets=[SetEntry(reps=12), SetEntry(reps=10)])

        result = build_for_workout(pull_up, workout, cat)
        assert result is not None
        assert result.measurement == "bodyweight"
        assert result.total_volume == pytest.approx(22)
        assert result.major_slices[0].name == "Back"
        assert result.major_slices[0].amount == pytest.approx(22)
