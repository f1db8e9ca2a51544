"""
Tests for nutrient report parsing and meal summaries.
"""

from datetime import date

import pytest

from conftest import SAMPLE_NUTRITION_REPORT
from line_health_agent.extraction import format_summary, parse_nutrient_report, report_template, summarize_meals
from line_health_agent.prompts import NUTRITION_PROMPT
from line_health_agent.models import DateRange, MealLogEntry, MealType, NutrientVector


class TestParseNutrientReport:
    """Tests for parse_nutrient_report()."""

    def test_complete_report(self):
        """All nine lines are read."""
        result = parse_nutrient_report(SAMPLE_NUTRITION_REPORT)

        assert result.kcal == 520
        assert result.protein_g == 18.5
        assert result.fat_g == 12
        assert result.carbs_g == 80
        assert result.vitamin_b6_mg == 0.4
        assert result.vitamin_d_ug == 1.2
        assert result.magnesium_mg == 60
        assert result.iron_mg == 2.1
        assert result.zinc_mg == 1.8

    def test_full_width_colon(self):
        result = parse_nutrient_report("カロリー：350 kcal\nタンパク質： 12 g")
        assert result.kcal == 350
        assert result.protein_g == 12

    def test_missing_lines_default_to_zero(self):
        """A partial report keeps what it can and zeroes the rest."""
        result = parse_nutrient_report("カロリー: 400 kcal\n鉄: 3 mg")

        assert result.kcal == 400
        assert result.iron_mg == 3
        assert result.protein_g == 0
        assert result.zinc_mg == 0

    def test_non_numeric_value_is_zero(self):
        result = parse_nutrient_report("カロリー: 不明\n脂質: 1.2.3 g\n炭水化物: 45 g")

        assert result.kcal == 0
        assert result.fat_g == 0
        assert result.carbs_g == 45

    def test_garbage_and_empty(self):
        assert parse_nutrient_report("I cannot estimate that.") == NutrientVector()
        assert parse_nutrient_report("") == NutrientVector()

    def test_vitamins_do_not_collide(self):
        """ビタミンB6 and ビタミンD are matched independently."""
        result = parse_nutrient_report("ビタミンD: 5 μg\nビタミンB6: 0.9 mg")
        assert result.vitamin_d_ug == 5
        assert result.vitamin_b6_mg == 0.9

    def test_parsing_is_deterministic(self):
        """Same report text always yields the same vector."""
        assert parse_nutrient_report(SAMPLE_NUTRITION_REPORT) == parse_nutrient_report(SAMPLE_NUTRITION_REPORT)

    def test_template_has_every_field(self):
        lines = report_template().splitlines()
        assert lines[0] == "カロリー: xx kcal"
        assert lines[-1] == "亜鉛: xx mg"
        assert len(lines) == 9

    def test_nutrition_prompt_embeds_template(self):
        """The prompt asks for exactly the lines the parser reads."""
        assert report_template() in NUTRITION_PROMPT
        assert "{report_template}" not in NUTRITION_PROMPT
        assert NUTRITION_PROMPT.startswith("あなたは管理栄養士です")


def _entry(meal_date, **nutrients):
    return MealLogEntry(
        logged_date=meal_date,
        logged_time="12:00",
        meal_date=meal_date,
        meal_type=MealType.LUNCH,
        raw_text="test",
        nutrients=NutrientVector(**nutrients),
    )


class TestSummarizeMeals:
    """Tests for summarize_meals() and format_summary()."""

    def test_totals_and_daily_average(self):
        """500 + 700 kcal over two days: 1200 total, 600 per day."""
        entries = [_entry(date(2026, 1, 10), kcal=500), _entry(date(2026, 1, 11), kcal=700)]
        summary = summarize_meals(entries, DateRange(date(2026, 1, 10), date(2026, 1, 11)))

        assert summary.totals.kcal == 1200
        assert summary.days == 2
        assert summary.average("kcal") == 600
        assert "カロリー: 1200.0 kcal（平均 600.0 kcal/日）" in format_summary(summary)

    def test_single_day_range(self):
        entries = [_entry(date(2026, 1, 10), protein_g=30), _entry(date(2026, 1, 10), protein_g=15)]
        summary = summarize_meals(entries, DateRange(date(2026, 1, 10), date(2026, 1, 10)))

        assert summary.days == 1
        assert summary.totals.protein_g == 45

    def test_format_has_header_and_nine_lines(self):
        entries = [_entry(date(2026, 1, 8), kcal=2100, vitamin_d_ug=7)]
        summary = summarize_meals(entries, DateRange(date(2026, 1, 8), date(2026, 1, 14)))
        lines = format_summary(summary).split("\n")

        assert lines[0] == "2026-01-08 〜 2026-01-14 のサマリー"
        assert len(lines) == 10
        assert "カロリー: 2100.0 kcal（平均 300.0 kcal/日）" in lines
        assert "ビタミンD: 7.0 μg（平均 1.0 μg/日）" in lines
        assert "亜鉛: 0.0 mg（平均 0.0 mg/日）" in lines

    def test_empty_entries_rejected(self):
        """Callers must reply 'no records' rather than summarize nothing."""
        with pytest.raises(ValueError):
            summarize_meals([], DateRange(date(2026, 1, 1), date(2026, 1, 2)))


class TestMealRows:
    """Tests for the meal sheet row layout."""

    def test_to_row_layout(self):
        entry = MealLogEntry(
            logged_date=date(2026, 1, 15),
            logged_time="12:30",
            meal_date=date(2026, 1, 14),
            meal_type=MealType.LUNCH,
            raw_text="昨日の昼食はサラダ",
            nutrients=NutrientVector(kcal=300),
        )
        row = entry.to_row()

        assert len(row) == 14
        assert row[:5] == ["2026-01-15", "12:30", "2026-01-14", "Lunch", "昨日の昼食はサラダ"]
        assert row[5] == 300

    def test_from_row_tolerates_bad_cells(self):
        """Missing, blank, negative and text cells become 0."""
        entry = MealLogEntry.from_row(["2026-01-10", "08:00", "2026-01-10", "Brunch", "x", "500", "", "abc", "-5"])

        assert entry.meal_type is MealType.UNKNOWN
        assert entry.nutrients.kcal == 500
        assert entry.nutrients.protein_g == 0
        assert entry.nutrients.fat_g == 0
        assert entry.nutrients.carbs_g == 0
        assert entry.nutrients.zinc_mg == 0

    def test_nutrients_never_negative(self):
        assert NutrientVector(kcal=-100).kcal == 0
