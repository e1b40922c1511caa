"""Tests for inspection integrity checks and filtering."""

import pytest
from pydantic import ValidationError

from inspectflow.schemas import FilledStep, FilterParams, InspectionQuery
from inspectflow.services.inspection_service import (
    FilledStepMismatchError,
    filter_inspections,
    missing_media_steps,
    validate_filled_steps,
)


def _filled(step_id, media_urls=()):
    return FilledStep(
        step_id=step_id,
        response_text="ok",
        media_urls=list(media_urls),
        timestamp="2025-06-10T12:00:00.000Z",
    )


class TestFilledSteps:
    def test_matching_steps_pass(self, make_inspection, make_workflow):
        validate_filled_steps(make_inspection(), make_workflow())

    def test_partial_answers_pass(self, make_inspection, make_workflow):
        validate_filled_steps(make_inspection(filled_steps=[_filled("step-2")]), make_workflow())

    def test_wrong_workflow(self, make_inspection, make_workflow):
        with pytest.raises(FilledStepMismatchError, match="belongs to workflow"):
            validate_filled_steps(make_inspection(workflow_id="wf-2"), make_workflow())

    def test_unknown_step(self, make_inspection, make_workflow):
        inspection = make_inspection(filled_steps=[_filled("step-9")])
        with pytest.raises(FilledStepMismatchError, match="Unknown step id: step-9"):
            validate_filled_steps(inspection, make_workflow())

    def test_duplicate_step(self, make_inspection, make_workflow):
        inspection = make_inspection(filled_steps=[_filled("step-1"), _filled("step-1")])
        with pytest.raises(FilledStepMismatchError, match="more than once"):
            validate_filled_steps(inspection, make_workflow())

    def test_missing_media_steps(self, make_inspection, make_workflow):
        inspection = make_inspection(
            filled_steps=[_filled("step-1"), _filled("step-2")]
        )
        assert missing_media_steps(inspection, make_workflow()) == ["step-2"]
        assert missing_media_steps(make_inspection(), make_workflow()) == []


@pytest.fixture
def inspections(make_inspection):
    return [
        make_inspection(id="jun-9", inspection_date="2025-06-09T12:00:00.000Z"),
        make_inspection(
            id="jun-10",
            inspection_date="2025-06-10T23:59:00.000Z",
            status="approved",
        ),
        make_inspection(
            id="jun-11",
            inspection_date="2025-06-11T00:30:00.000Z",
            category="Electrical",
        ),
        make_inspection(id="other-org", organization_id="org-2"),
    ]


class TestFilterInspections:
    def test_date_range_is_inclusive(self, inspections):
        query = InspectionQuery(start_date="2025-06-10", end_date="2025-06-11")
        result = filter_inspections(inspections, query)
        assert [i.id for i in result] == ["jun-10", "jun-11", "other-org"]

    def test_filter_params_scope_to_organization(self, inspections):
        query = FilterParams(organization_id="org-1", role="admin")
        result = filter_inspections(inspections, query)
        assert "other-org" not in [i.id for i in result]

    def test_equality_filters(self, inspections):
        assert [i.id for i in filter_inspections(inspections, InspectionQuery(status="approved"))] == ["jun-10"]
        assert [
            i.id for i in filter_inspections(inspections, InspectionQuery(category="Electrical"))
        ] == ["jun-11"]
        assert filter_inspections(inspections, InspectionQuery(assigned_to="nobody")) == []

    def test_pagination(self, inspections):
        page_two = filter_inspections(inspections, InspectionQuery(page=2, limit=3))
        assert [i.id for i in page_two] == ["other-org"]


@pytest.fixture
def assigned(make_inspection):
    return [
        make_inspection(id="mine", assigned_to="user-1", approver_id="user-9"),
        make_inspection(id="theirs", assigned_to="user-2", approver_id="user-1"),
        make_inspection(id="other", assigned_to="user-3", approver_id="user-3"),
    ]


class TestRoleScoping:
    def test_inspector_sees_own_assignments(self, assigned):
        query = FilterParams(
            organization_id="org-1", role="inspector", user_id="user-1", assigned_to="user-3"
        )
        assert [i.id for i in filter_inspections(assigned, query)] == ["mine"]

    def test_approver_sees_own_approvals(self, assigned):
        query = FilterParams(
            organization_id="org-1", role="approver", user_id="user-1", approver_id="user-3"
        )
        assert [i.id for i in filter_inspections(assigned, query)] == ["theirs"]

    def test_admin_may_filter_by_people(self, assigned):
        query = FilterParams(
            organization_id="org-1", role="admin", user_id="user-1", approver_id="user-3"
        )
        assert [i.id for i in filter_inspections(assigned, query)] == ["other"]

    def test_other_roles_ignore_people_filters(self, assigned):
        query = FilterParams(organization_id="org-1", role="guest", assigned_to="user-1")
        assert len(filter_inspections(assigned, query)) == 3

    @pytest.mark.parametrize("role", ["inspector", "approver"])
    def test_scoped_roles_need_user_id(self, role):
        with pytest.raises(ValidationError, match="userId is required"):
            FilterParams(organization_id="org-1", role=role)
