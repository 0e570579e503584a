import pytest

from app.core.errors import NotFound
from app.schemas.onboarding import OnboardingStep
from app.schemas.users import UserRole
from app.services import onboarding_service


def test_initialize_is_idempotent(db_session, company_user):
    first = onboarding_service.initialize_onboarding(
        db_session, company_user.id, UserRole.company
    )
    second = onboarding_service.initialize_onboarding(
        db_session, company_user.id, UserRole.company
    )

    assert first.id == second.id
    assert second.completed_steps == []


def test_completing_steps_only_grows_the_set(db_session, company_user):
    onboarding_service.initialize_onboarding(db_session, company_user.id, UserRole.company)

    lengths = []
    for step in [
        OnboardingStep.dashboard,
        OnboardingStep.dashboard,
        OnboardingStep.scouting,
        OnboardingStep.dashboard,
    ]:
        progress = onboarding_service.complete_onboarding_step(
            db_session, company_user.id, step
        )
        lengths.append(len(progress.completed_steps))

    assert lengths == [1, 1, 2, 2]
    assert progress.completed_steps == ["DASHBOARD", "SCOUTING"]
    assert progress.completed_at is None


def test_completing_every_step_sets_completed_at(db_session, influencer_user):
    onboarding_service.initialize_onboarding(
        db_session, influencer_user.id, UserRole.influencer
    )

    for step in OnboardingStep:
        progress = onboarding_service.complete_onboarding_step(
            db_session, influencer_user.id, step
        )

    assert len(progress.completed_steps) == onboarding_service.TOTAL_STEPS
    assert progress.completed_at is not None

    summary = onboarding_service.get_onboarding_progress(db_session, influencer_user.id)
    assert summary["progress"] == {"completed": 7, "total": 7, "percentage": 100}
    assert summary["is_completed"] is True


def test_complete_step_without_progress_raises(db_session, company_user):
    with pytest.raises(NotFound):
        onboarding_service.complete_onboarding_step(
            db_session, company_user.id, OnboardingStep.dashboard
        )


def test_skip_marks_completed_regardless_of_progress(db_session, company_user):
    onboarding_service.initialize_onboarding(db_session, company_user.id, UserRole.company)
    onboarding_service.complete_onboarding_step(
        db_session, company_user.id, OnboardingStep.dashboard
    )

    progress = onboarding_service.skip_onboarding(db_session, company_user.id)

    assert progress.skipped is True
    assert progress.skipped_at is not None
    assert progress.completed_at is not None
    assert progress.completed_steps == ["DASHBOARD"]


def test_progress_is_none_before_initialization(db_session, company_user):
    assert onboarding_service.get_onboarding_progress(db_session, company_user.id) is None


def test_step_catalog_is_role_specific():
    company_steps = onboarding_service.get_onboarding_steps(UserRole.company)
    influencer_steps = onboarding_service.get_onboarding_steps(UserRole.influencer)

    assert [s["step"] for s in company_steps] == list(OnboardingStep)
    assert [s["step"] for s in influencer_steps] == list(OnboardingStep)
    assert company_steps[1]["title"] != influencer_steps[1]["title"]
    assert onboarding_service.get_onboarding_steps(UserRole.admin) == []


def test_onboarding_endpoints(client, company_user, headers_for):
    headers = headers_for(company_user)

    missing = client.get("/api/onboarding", headers=headers)
    assert missing.status_code == 404

    initialized = client.post("/api/onboarding/initialize", headers=headers)
    assert initialized.status_code == 200
    assert initialized.json()["progress"]["percentage"] == 0

    completed = client.post(
        "/api/onboarding/steps/complete",
        json={"step": "PROJECT_CREATION"},
        headers=headers,
    )
    assert completed.status_code == 200
    assert completed.json()["completed_steps"] == ["PROJECT_CREATION"]
    assert completed.json()["progress"] == {"completed": 1, "total": 7, "percentage": 14}

    steps = client.get("/api/onboarding/steps", headers=headers)
    assert len(steps.json()) == 7


def test_completion_rate_for_admin(
    client, db_session, company_user, influencer_user, admin_user, headers_for
):
    onboarding_service.initialize_onboarding(db_session, company_user.id, UserRole.company)
    onboarding_service.initialize_onboarding(
        db_session, influencer_user.id, UserRole.influencer
    )
    onboarding_service.skip_onboarding(db_session, company_user.id)

    response = client.get(
        "/api/admin/onboarding/completion-rate", headers=headers_for(admin_user)
    )

    assert response.status_code == 200
    assert response.json() == {"total": 2, "completed": 1, "rate": 50}
