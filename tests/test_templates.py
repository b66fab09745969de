"""Tests for exercise templates (YAML loading, registry, name matching) and slice colours."""

import pytest

from muscle_share.core.palette import hashed_color, palette_color, slice_color
from muscle_share.core.templates import TEMPLATE_REGISTRY, find_template, get_template
from muscle_share.core.templates.loader import load_templates_from_yaml

BENCH_YAML = """\
template_id: bench
canonical_name: Bench
aliases: [bench press]
major_shares:
  Chest: 60
  Shoulders: 25
  Triceps: 15
specific_shares:
  Pectoralis Major: 60
"""


class TestBundledTemplates:
    def test_registry_is_populated(self):
        assert {"barbell_bench_press", "back_squat", "deadlift", "overhead_press", "pull_up"} <= set(
            TEMPLATE_REGISTRY
        )

    @pytest.mark.parametrize("template_id", sorted(TEMPLATE_REGISTRY))
    def test_major_shares_total_hundred(self, template_id):
        assert get_template(template_id).total_major_share == 100

    def test_get_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown template"):
            get_template("zottman_curl")


class TestFindTemplate:
    @pytest.mark.parametrize(
        "name, template_id",
        [
            ("Overhead Press", "overhead_press"),
            ("barbell_bench_press", "barbell_bench_press"),
            ("Flat Bench", "barbell_bench_press"),
            ("Incline Bench Press", "barbell_bench_press"),
            ("Military Press (seated)", "overhead_press"),
            ("Pull-Up", "pull_up"),
            ("Romanian Deadlift", "deadlift"),
        ],
    )
    def test_matches(self, name, template_id):
        tpl = find_template(name)
        assert tpl is not None
        assert tpl.template_id == template_id

    @pytest.mark.parametrize("name", ["Zottman Curl", "", "   "])
    def test_no_match(self, name):
        assert find_template(name) is None


class TestLoader:
    def test_loads_bundled_dir(self, tmp_path):
        bundled = tmp_path / "bundled"
        bundled.mkdir()
        (bundled / "bench.yaml").write_text(BENCH_YAML)

        templates = load_templates_from_yaml(bundled_dir=bundled, user_dir=tmp_path / "none")
        tpl = templates["bench"]
        assert tpl.canonical_name == "Bench"
        assert [(s.name, s.share) for s in tpl.major_shares] == [
            ("Chest", 60),
            ("Shoulders", 25),
            ("Triceps", 15),
        ]

    def test_user_file_is_deep_merged(self, tmp_path):
        bundled = tmp_path / "bundled"
        user = tmp_path / "user"
        bundled.mkdir()
        user.mkdir()
        (bundled / "bench.yaml").write_text(BENCH_YAML)
        (user / "bench.yaml").write_text("major_shares:\n  Chest: 50\n  Triceps: 25\n")

        tpl = load_templates_from_yaml(bundled_dir=bundled, user_dir=user)["bench"]
        assert dict((s.name, s.share) for s in tpl.major_shares) == {
            "Chest": 50,
            "Shoulders": 25,
            "Triceps": 25,
        }
        assert tpl.aliases == ("bench press",)

    def test_user_only_file_adds_template(self, tmp_path):
        bundled = tmp_path / "bundled"
        user = tmp_path / "user"
        bundled.mkdir()
        user.mkdir()
        (bundled / "bench.yaml").write_text(BENCH_YAML)
        (user / "dip.yaml").write_text(
            "template_id: dip\ncanonical_name: Dip\nmajor_shares:\n  Triceps: 100\n"
        )

        templates = load_templates_from_yaml(bundled_dir=bundled, user_dir=user)
        assert set(templates) == {"bench", "dip"}

    def test_invalid_file_is_skipped_with_warning(self, tmp_path):
        bundled = tmp_path / "bundled"
        bundled.mkdir()
        (bundled / "bench.yaml").write_text(BENCH_YAML)
        (bundled / "broken.yaml").write_text("template_id: broken\nmajor_shares:\n  Chest: 150\n")

        with pytest.warns(UserWarning, match="broken"):
            templates = load_templates_from_yaml(bundled_dir=bundled, user_dir=tmp_path / "none")
        assert set(templates) == {"bench"}

    def test_nothing_loaded_returns_none(self, tmp_path):
        assert load_templates_from_yaml(bundled_dir=tmp_path, user_dir=tmp_path / "none") is None


class TestPalette:
    def test_known_group(self):
        assert palette_color("Chest") == "#e3596e"
        assert palette_color("  chest ") == "#e3596e"

    def test_partial_match(self):
        assert palette_color("Upper Back") == palette_color("Back")

    def test_unknown_is_none(self):
        assert palette_color("Neck") is None

    def test_hashed_colour_is_stable_hex(self):
        color = hashed_color("Neck")
        assert color == hashed_color("neck")
        assert color.startswith("#") and len(color) == 7

    def test_slice_color_falls_back(self):
        assert slice_color("Chest") == "#e3596e"
        assert slice_color("Neck") == hashed_color("Neck")
