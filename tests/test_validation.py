"""Tests for the contribution validator."""

from muscle_share.core.config import (
    MSG_GROUP_TOTAL,
    MSG_MAJOR_TOTAL,
    MSG_ORPHAN_SPECIFICS,
    MSG_SPECIFIC_TOTAL,
)
from muscle_share.core.models import (
    Catalog,
    Exercise,
    MajorContribution,
    MuscleGroup,
    SpecificContribution,
    SpecificMuscle,
)
from muscle_share.core.ratio_store import RatioStore
from muscle_share.core.validation import validate, validate_exercise, validate_store

BENCH_MAJORS = {"Chest": 60, "Shoulders": 25, "Triceps": 15}


def _catalog() -> Catalog:
    return Catalog(
        groups=[
            MuscleGroup("Chest", id="chest"),
            MuscleGroup("Shoulders", id="shoulders"),
        ],
        muscles=[
            SpecificMuscle("Pectoralis Major", group_id="chest", id="pec-major"),
            SpecificMuscle("Pectoralis Minor", group_id="chest", id="pec-minor"),
            SpecificMuscle("Anterior Deltoid", group_id="shoulders", id="ant-delt"),
            SpecificMuscle("Serratus Anterior", id="serratus"),
        ],
    )


class TestValidate:
    def test_empty_is_consistent(self):
        assert validate({}, {}) == []

    def test_fully_specified_exercise(self):
        majors = {"Chest": 60, "Triceps": 40}
        ratios = {"Chest": {"PecMajor": 0.9, "PecMinor": 0.1}, "Triceps": {"LongHead": 1.0}}
        assert validate(majors, ratios) == []

    def test_majors_only(self):
        assert validate(BENCH_MAJORS, {}) == []

    def test_major_total(self):
        messages = validate({"Chest": 60, "Triceps": 30}, {})
        assert messages == [MSG_MAJOR_TOTAL.format(total=90)]

    def test_partial_breakdown_reports_overall_total_only(self):
        # Chest apportions to exactly 60; only the overall specific total is off
        ratios = {"Chest": {"PecMajor": 0.9, "PecMinor": 0.1}}
        messages = validate(BENCH_MAJORS, ratios)
        assert messages == [MSG_SPECIFIC_TOTAL.format(total=60)]
        assert not any("Chest" in m for m in messages)

    def test_stale_cached_shares_are_reported_per_group(self):
        ratios = {
            "Chest": {"PecMajor": 0.9, "PecMinor": 0.1},
            "Shoulders": {"AntDelt": 0.9, "LatDelt": 0.1},
            "Triceps": {"LongHead": 1.0},
        }
        cached = {"Shoulders": {"AntDelt": 21, "LatDelt": 3}}
        messages = validate(BENCH_MAJORS, ratios, absolute_by_group=cached)
        assert messages == [
            MSG_SPECIFIC_TOTAL.format(total=99),
            MSG_GROUP_TOTAL.format(group="Shoulders", share=25),
        ]

    def test_rules_are_independent(self):
        majors = {"Chest": 50, "Triceps": 40}
        ratios = {"Chest": {"PecMajor": 1.0}}
        cached = {"Chest": {"PecMajor": 45}}
        messages = validate(majors, ratios, absolute_by_group=cached)
        assert messages == [
            MSG_MAJOR_TOTAL.format(total=90),
            MSG_SPECIFIC_TOTAL.format(total=45),
            MSG_GROUP_TOTAL.format(group="Chest", share=50),
        ]

    def test_group_messages_use_display_names_in_name_order(self):
        majors = {"id-t": 50, "id-c": 50}
        ratios = {"id-t": {"a": 1.0}, "id-c": {"b": 1.0}}
        cached = {"id-t": {"a": 10}, "id-c": {"b": 10}}
        names = {"id-t": "Triceps", "id-c": "Chest"}
        messages = validate(majors, ratios, group_names=names, absolute_by_group=cached)
        assert messages[1:] == [
            MSG_GROUP_TOTAL.format(group="Chest", share=50),
            MSG_GROUP_TOTAL.format(group="Triceps", share=50),
        ]

    def test_out_of_range_share_does_not_raise(self):
        messages = validate({"Chest": 130}, {"Chest": {"PecMajor": 1.0}})
        assert MSG_MAJOR_TOTAL.format(total=130) in messages


class TestValidateStore:
    def test_names_groups_from_catalog(self):
        cat = _catalog()
        store = RatioStore(
            major_shares={"chest": 60, "shoulders": 40},
            specific_ratios={"chest": {"pec-major": 0.5, "pec-minor": 0.5}},
        )
        assert validate_store(store, cat) == [MSG_SPECIFIC_TOTAL.format(total=60)]


class TestValidateExercise:
    def _exercise(self, majors, specifics) -> Exercise:
        return Exercise(
            name="Push-Up",
            date_added="2026-03-01",
            major_contributions=[MajorContribution(g, s) for g, s in majors],
            specific_contributions=[SpecificContribution(m, s) for m, s in specifics],
        )

    def test_consistent(self):
        ex = self._exercise(
            [("chest", 70), ("shoulders", 30)],
            [("pec-major", 60), ("pec-minor", 10), ("ant-delt", 30)],
        )
        assert validate_exercise(ex, _catalog()) == []

    def test_group_total_mismatch(self):
        ex = self._exercise(
            [("chest", 70), ("shoulders", 30)],
            [("pec-major", 60), ("pec-minor", 5), ("ant-delt", 35)],
        )
        assert validate_exercise(ex, _catalog()) == [
            MSG_GROUP_TOTAL.format(group="Chest", share=70),
            MSG_GROUP_TOTAL.format(group="Shoulders", share=30),
        ]

    def test_group_without_specifics_is_not_checked(self):
        ex = self._exercise([("chest", 70), ("shoulders", 30)], [("pec-major", 70)])
        assert validate_exercise(ex, _catalog()) == [MSG_SPECIFIC_TOTAL.format(total=70)]

    def test_orphan_specifics(self):
        ex = self._exercise([("chest", 100)], [("pec-major", 100), ("ant-delt", 5)])
        assert validate_exercise(ex, _catalog()) == [
            MSG_SPECIFIC_TOTAL.format(total=105),
            MSG_ORPHAN_SPECIFICS,
        ]

    def test_unknown_and_ungrouped_muscles_count_toward_total_only(self):
        ex = self._exercise(
            [("chest", 100)],
            [("pec-major", 100), ("serratus", 3), ("deleted", 2)],
        )
        assert validate_exercise(ex, _catalog()) == [MSG_SPECIFIC_TOTAL.format(total=105)]
