"""Tests for per-employee score aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from apps.hrm.models import Section, SectionParticipation
from apps.performance.constants import AssignmentKind, ReviewFrequency, ScopeType
from apps.performance.models import AssignmentOverride, AssignmentTemplate
from apps.performance.services import ScoringService, compute_scores, recompute_annual


@pytest.fixture
def scored_employee(employee, objective_template, revenue_goal, aptitude_template, record_goal, record_rating):
    """Employee with Q1 = 80 and Q2 = 60 on revenue and a 4/5 teamwork rating."""
    record_goal(employee, objective_template, "2024Q1", [80])
    record_goal(employee, objective_template, "2024Q2", [60])
    record_rating(employee, aptitude_template, "2024A1", 4)
    return employee


@pytest.mark.django_db
class TestComputeScores:
    def test_global_score_mixes_blocks(self, scored_employee, objective_template, aptitude_template):
        """Test objective 87.5 and aptitude 80 mix 70/30 into 85.3."""
        [score] = compute_scores([scored_employee.pk], 2024)

        assert score.employee_code == "EMP100"
        assert score.objective_score == Decimal("87.5")
        assert score.aptitude_score == Decimal("80")
        assert score.global_score == Decimal("85.3")

        [objective] = score.objectives
        assert objective.template_id == objective_template.pk
        assert objective.weight == Decimal("60")
        [goal] = objective.goals
        assert goal.score == Decimal("87.5")
        assert goal.met is True
        assert [row["period_code"] for row in objective.periods] == ["2024Q1", "2024Q2"]
        assert [row["score"] for row in objective.periods] == [Decimal("100.00"), Decimal("75.00")]
        assert score.aptitudes[0].template_id == aptitude_template.pk

    def test_official_only_counts_closed_evaluations(self, scored_employee, objective_template, close_evaluation):
        assert ScoringService(2024, official_only=True).compute_scores([scored_employee.pk])[0].global_score == Decimal(
            "0.0"
        )

        close_evaluation(scored_employee.evaluations.get(template=objective_template, period_code="2024Q1"))

        [score] = ScoringService(2024, official_only=True).compute_scores([scored_employee.pk])
        assert score.objective_score == Decimal("100")
        assert score.aptitude_score == Decimal("0")
        assert score.global_score == Decimal("70.0")

    def test_excluded_assignment_is_left_out(self, scored_employee, aptitude_template):
        AssignmentOverride.objects.create(
            employee=scored_employee, year=2024, template=aptitude_template, excluded=True
        )

        [score] = compute_scores([scored_employee.pk], 2024)

        assert score.aptitudes == []
        assert score.excluded_template_ids == [aptitude_template.pk]
        assert score.global_score == Decimal("61.3")

    def test_weight_override_changes_block_weighting(self, scored_employee, cumulative_template, record_goal):
        record_goal(scored_employee, cumulative_template, "2024Q1", [30])

        [before] = compute_scores([scored_employee.pk], 2024)
        AssignmentOverride.objects.create(
            employee=scored_employee, year=2024, template=cumulative_template, weight=Decimal("0")
        )
        [after] = compute_scores([scored_employee.pk], 2024)

        # (60 * 87.5 + 40 * 37.5) / 100
        assert before.objective_score == Decimal("67.5")
        assert after.objective_score == Decimal("87.5")
        overridden = next(item for item in after.objectives if item.template_id == cumulative_template.pk)
        assert overridden.weight == Decimal("0")
        assert overridden.override_source == "EMPLOYEE"

    def test_section_weight_scales_with_participation(self, employee, department, section):
        other_section = Section.objects.create(code="SALES-S", name="Sales South", department=department)
        template = AssignmentTemplate.objects.create(
            kind=AssignmentKind.OBJECTIVE,
            year=2024,
            scope_type=ScopeType.SECTION,
            section=section,
            name="Section pipeline",
            base_weight=Decimal("50"),
            frequency=ReviewFrequency.ANNUAL,
        )
        SectionParticipation.objects.create(employee=employee, section=section, year=2024, percentage=Decimal("40"))
        SectionParticipation.objects.create(
            employee=employee, section=other_section, year=2024, percentage=Decimal("60")
        )

        [score] = compute_scores([employee.pk], 2024)

        [objective] = score.objectives
        assert objective.template_id == template.pk
        assert objective.base_weight == Decimal("50")
        assert objective.weight == Decimal("20")

    def test_section_template_skips_employees_participating_elsewhere(self, employee, department, section):
        other_section = Section.objects.create(code="SALES-S", name="Sales South", department=department)
        AssignmentTemplate.objects.create(
            kind=AssignmentKind.APTITUDE,
            year=2024,
            scope_type=ScopeType.SECTION,
            section=section,
            name="Section teamwork",
            base_weight=Decimal("50"),
        )
        SectionParticipation.objects.create(
            employee=employee, section=other_section, year=2024, percentage=Decimal("100")
        )

        [score] = compute_scores([employee.pk], 2024)

        assert score.aptitudes == []

    def test_template_with_empty_window_is_skipped(self, scored_employee, department):
        """Test that a stored template without any period does not break scoring of the others."""
        AssignmentTemplate.objects.create(
            kind=AssignmentKind.APTITUDE,
            year=2024,
            scope_type=ScopeType.DEPARTMENT,
            department=department,
            name="Leadership",
            base_weight=Decimal("60"),
            frequency=ReviewFrequency.QUARTERLY,
            window_start=date(2025, 10, 1),
        )

        [score] = compute_scores([scored_employee.pk], 2024)

        assert score.global_score == Decimal("85.3")
        assert [item.name for item in score.aptitudes] == ["Teamwork"]
        assert recompute_annual(scored_employee.pk, 2024)["global"] == Decimal("85.3")

    def test_unknown_employees_are_skipped(self, employee):
        scores = compute_scores([employee.pk, 999999], 2024)

        assert [item.employee_id for item in scores] == [employee.pk]


@pytest.mark.django_db
class TestRecomputeAnnual:
    def test_recompute_matches_aggregation(self, scored_employee):
        result = recompute_annual(scored_employee.pk, 2024)

        assert result["employee_id"] == scored_employee.pk
        assert result["objective_score"] == Decimal("87.50")
        assert result["aptitude_score"] == Decimal("80.00")
        assert result["global"] == Decimal("85.3")
        assert result["objectives"][0]["goals"][0]["periods"][1]["evaluated_value"] == Decimal("60")

    def test_recompute_is_repeatable(self, scored_employee):
        assert recompute_annual(scored_employee.pk, 2024) == recompute_annual(scored_employee.pk, 2024)
