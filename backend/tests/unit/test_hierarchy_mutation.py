from __future__ import annotations

from orgchart.services.evaluation_relations import resolve_evaluator
from orgchart.services.hierarchy_mutation import (
    move_employee,
    set_evaluator_flag,
    set_evaluator_override,
    update_employee,
)
from orgchart.services.integrity import find_integrity_issues
from tests.conftest import make_employee


class TestMoveEmployee:
    def test_move_to_current_placement_is_noop(self, sample_org):
        e1 = sample_org.find_employee("e1")
        result = move_employee(e1, e1.department, e1.section, e1.course, sample_org)
        assert result is sample_org
        assert result == sample_org

    def test_empty_and_missing_course_are_the_same_placement(self, sample_org):
        e3 = sample_org.find_employee("e3")
        assert move_employee(e3, "Sales", "SalesSec", "", sample_org) is sample_org
        assert move_employee(e3, "Sales", "SalesSec", None, sample_org) is sample_org

    def test_move_to_other_department_recomputes_evaluator(self, sample_org):
        e3 = sample_org.find_employee("e3").model_copy(update={"evaluator_id": "m3"})
        org = sample_org.replace_employee(e3)

        result = move_employee(e3, "Tech", "", None, org)

        moved = result.find_employee("e3")
        assert moved.department == "Tech"
        assert moved.section == ""
        assert moved.course is None
        assert moved.evaluator_id is None
        assert moved.evaluator == "Name m5"
        assert resolve_evaluator(moved, result) == "m5"

    def test_move_into_course(self, sample_org):
        e1 = sample_org.find_employee("e1")
        result = move_employee(e1, "Tech", "Platform", "Infra", sample_org)
        moved = result.find_employee("e1")
        assert moved.course == "Infra"
        assert resolve_evaluator(moved, result) == "m6"

    def test_course_dropped_for_section_target(self, sample_org):
        e2 = sample_org.find_employee("e2")
        result = move_employee(e2, "Sales", "SalesSec", None, sample_org)
        moved = result.find_employee("e2")
        assert moved.course is None
        assert "course" not in moved.model_dump(by_alias=True, exclude_none=True)
        assert resolve_evaluator(moved, result) == "m2"

    def test_preserve_override(self, sample_org):
        e8 = sample_org.find_employee("e8")
        result = move_employee(e8, "Sales", "", None, sample_org, preserve_override=True)
        moved = result.find_employee("e8")
        assert moved.evaluator_id == "m5"
        assert resolve_evaluator(moved, result) == "m5"

    def test_section_manager_cannot_be_dropped_into_own_section(self, sample_org):
        moved_away = move_employee(sample_org.find_employee("m2"), "Tech", "", None, sample_org)
        assert moved_away.find_employee("m2").department == "Tech"

        back = move_employee(moved_away.find_employee("m2"), "Sales", "SalesSec", None, moved_away)
        assert back is moved_away

    def test_department_head_cannot_be_dropped_into_own_department(self, sample_org):
        m1 = sample_org.find_employee("m1")
        moved_away = move_employee(m1, "Sales", "SalesSec", None, sample_org)
        back = move_employee(moved_away.find_employee("m1"), "Sales", "", None, moved_away)
        assert back is moved_away

    def test_unknown_target_is_ignored(self, sample_org):
        e1 = sample_org.find_employee("e1")
        assert move_employee(e1, "Nowhere", "", None, sample_org) is sample_org
        assert move_employee(e1, "Sales", "SalesSec", "Ghost", sample_org) is sample_org

    def test_unknown_employee_is_ignored(self, sample_org):
        stranger = make_employee("zz", "Sales")
        assert move_employee(stranger, "Tech", "", None, sample_org) is sample_org

    def test_input_is_not_mutated(self, sample_org):
        before = sample_org.to_document()
        e1 = sample_org.find_employee("e1")
        result = move_employee(e1, "Tech", "", None, sample_org)
        assert result is not sample_org
        assert sample_org.to_document() == before
        assert result.departments == sample_org.departments

    def test_uses_stored_record_not_stale_argument(self, sample_org):
        stale = sample_org.find_employee("e1").model_copy(update={"name": "Stale"})
        result = move_employee(stale, "Tech", "", None, sample_org)
        assert result.find_employee("e1").name == "Name e1"

    def test_stale_argument_placement_does_not_block_move(self, sample_org):
        stale = sample_org.find_employee("e1").model_copy(update={"department": "Tech", "section": "", "course": None})
        result = move_employee(stale, "Tech", "", None, sample_org)
        e1 = result.find_employee("e1")
        assert e1.department == "Tech"
        assert resolve_evaluator(e1, result) == "m5"


class TestSetEvaluatorOverride:
    def test_sets_override_and_display_name(self, sample_org):
        result = set_evaluator_override("e1", "m5", sample_org)
        e1 = result.find_employee("e1")
        assert e1.evaluator_id == "m5"
        assert e1.evaluator == "Name m5"
        assert resolve_evaluator(e1, result) == "m5"

    def test_clear_override_falls_back_to_placement(self, sample_org):
        result = set_evaluator_override("e8", None, sample_org)
        e8 = result.find_employee("e8")
        assert e8.evaluator_id is None
        assert resolve_evaluator(e8, result) == "m3"

    def test_self_override_rejected(self, sample_org):
        assert set_evaluator_override("e1", "e1", sample_org) is sample_org

    def test_unknown_evaluator_rejected(self, sample_org):
        assert set_evaluator_override("e1", "ghost", sample_org) is sample_org

    def test_unknown_employee_rejected(self, sample_org):
        assert set_evaluator_override("ghost", "m1", sample_org) is sample_org

    def test_unchanged_override_is_noop(self, sample_org):
        assert set_evaluator_override("e8", "m5", sample_org) is sample_org


class TestSetEvaluatorFlag:
    def test_sets_flag(self, sample_org):
        result = set_evaluator_flag("e1", True, sample_org)
        assert result.find_employee("e1").is_evaluator is True

    def test_same_flag_is_noop(self, sample_org):
        assert set_evaluator_flag("e1", None, sample_org) is sample_org

    def test_unknown_employee(self, sample_org):
        assert set_evaluator_flag("ghost", True, sample_org) is sample_org


class TestUpdateEmployee:
    def test_updates_plain_fields(self, sample_org):
        edited = sample_org.find_employee("e1").model_copy(update={"phone": "111", "position": "主任"})
        result = update_employee(edited, sample_org)
        e1 = result.find_employee("e1")
        assert e1.phone == "111"
        assert e1.position == "主任"
        assert e1.evaluator == "Name m2"

    def test_placement_change_recomputes_evaluator(self, sample_org):
        edited = sample_org.find_employee("e8").model_copy(update={"department": "Tech", "section": "", "course": None})
        result = update_employee(edited, sample_org)
        e8 = result.find_employee("e8")
        assert e8.department == "Tech"
        assert e8.evaluator_id is None
        assert resolve_evaluator(e8, result) == "m5"

    def test_rejected_placement_keeps_other_edits(self, sample_org):
        edited = sample_org.find_employee("e1").model_copy(update={"department": "Nowhere", "phone": "222"})
        result = update_employee(edited, sample_org)
        e1 = result.find_employee("e1")
        assert e1.department == "Sales"
        assert e1.phone == "222"

    def test_self_override_is_dropped(self, sample_org):
        edited = sample_org.find_employee("e1").model_copy(update={"evaluator_id": "e1"})
        result = update_employee(edited, sample_org)
        assert result.find_employee("e1").evaluator_id is None

    def test_unknown_evaluator_override_is_ignored(self, sample_org):
        edited = sample_org.find_employee("e1").model_copy(update={"evaluator_id": "ghost", "phone": "333"})
        result = update_employee(edited, sample_org)
        e1 = result.find_employee("e1")
        assert e1.evaluator_id is None
        assert e1.phone == "333"
        assert find_integrity_issues(result) == []

    def test_unknown_evaluator_keeps_stored_override(self, sample_org):
        edited = sample_org.find_employee("e8").model_copy(update={"evaluator_id": "ghost"})
        result = update_employee(edited, sample_org)
        assert result.find_employee("e8").evaluator_id == "m5"

    def test_rename_updates_evaluator_names(self, sample_org):
        org = set_evaluator_override("e1", "m5", sample_org)
        edited = org.find_employee("m5").model_copy(update={"name": "Renamed"})
        result = update_employee(edited, org)
        assert result.find_employee("e1").evaluator == "Renamed"
        assert result.find_employee("m6").evaluator == "Renamed"
        assert result.find_employee("e7").evaluator == "Renamed"
        assert result.find_employee("e2").evaluator is None

    def test_rename_updates_unit_manager_names(self, sample_org):
        edited = sample_org.find_employee("m3").model_copy(update={"name": "Course Lead"})
        result = update_employee(edited, sample_org)
        section = result.departments[0].sections[0]
        assert section.courses[0].manager == "Course Lead"
        assert section.manager == "Name m2"
        assert result.departments[0].manager == "Name m1"
        assert sample_org.departments[0].sections[0].courses[0].manager == "Name m3"

    def test_unknown_employee(self, sample_org):
        assert update_employee(make_employee("ghost", "Sales"), sample_org) is sample_org
