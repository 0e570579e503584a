from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.core.errors import BadRequest, Conflict, Forbidden
from app.models.notifications import Notification
from app.models.projects import Project
from app.schemas.notifications import NotificationType
from app.schemas.projects import ProjectCreate, ScoutStatus
from app.services import project_service, scout_service


@pytest.fixture
def project(db_session, company_user) -> Project:
    start = date.today() + timedelta(days=3)
    return project_service.create_project(
        db_session,
        company_user.company,
        ProjectCreate(
            title="Summer launch",
            description="Launch content",
            category="fashion",
            budget=100000,
            start_date=start,
            end_date=start + timedelta(days=14),
        ),
    )


def test_send_scout_notifies_influencer(client, db_session, company_user, influencer_user, project, headers_for):
    response = client.post(
        "/api/scouts",
        json={
            "project_id": project.id,
            "influencer_id": influencer_user.influencer.id,
            "message": "Would love to work with you",
        },
        headers=headers_for(company_user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["scout"]["status"] == "PENDING"
    assert body["scout"]["company_id"] == company_user.company.id

    notification = db_session.execute(
        select(Notification).where(Notification.user_id == influencer_user.id)
    ).scalar_one()
    assert notification.type == NotificationType.scout_received
    assert notification.data["project_id"] == project.id


def test_duplicate_scout_is_a_conflict(client, company_user, influencer_user, project, headers_for):
    payload = {"project_id": project.id, "influencer_id": influencer_user.influencer.id}

    first = client.post("/api/scouts", json=payload, headers=headers_for(company_user))
    second = client.post("/api/scouts", json=payload, headers=headers_for(company_user))

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["kind"] == "conflict"


def test_only_project_owner_can_scout(
    db_session, influencer_user, make_company_user, project
):
    rival = make_company_user("rival@example.com", "Rival")

    with pytest.raises(Forbidden):
        scout_service.send_scout_invitation(
            db_session, rival, project.id, influencer_user.influencer.id, None
        )
    with pytest.raises(Forbidden):
        scout_service.send_scout_invitation(
            db_session, influencer_user, project.id, influencer_user.influencer.id, None
        )


def test_scout_can_only_be_answered_once(db_session, company_user, influencer_user, project):
    scout = scout_service.send_scout_invitation(
        db_session, company_user, project.id, influencer_user.influencer.id, None
    )

    scout_service.accept_scout(db_session, influencer_user, scout.id)

    with pytest.raises(BadRequest):
        scout_service.accept_scout(db_session, influencer_user, scout.id)
    with pytest.raises(BadRequest):
        scout_service.reject_scout(db_session, influencer_user, scout.id, "changed my mind")


def test_only_invited_influencer_can_respond(
    client, db_session, company_user, influencer_user, make_influencer_user, project, headers_for
):
    scout = scout_service.send_scout_invitation(
        db_session, company_user, project.id, influencer_user.influencer.id, None
    )
    other = make_influencer_user("other@example.com", "Other")

    response = client.put(f"/api/scouts/{scout.id}/accept", headers=headers_for(other))
    assert response.status_code == 403

    viewed = client.get(f"/api/scouts/{scout.id}", headers=headers_for(other))
    assert viewed.status_code == 403

    owner_view = client.get(f"/api/scouts/{scout.id}", headers=headers_for(company_user))
    assert owner_view.status_code == 200


def test_reject_scout_records_reason_and_notifies_company(
    client, db_session, company_user, influencer_user, project, headers_for
):
    scout = scout_service.send_scout_invitation(
        db_session, company_user, project.id, influencer_user.influencer.id, None
    )

    response = client.put(
        f"/api/scouts/{scout.id}/reject",
        json={"reason": "Schedule conflict"},
        headers=headers_for(influencer_user),
    )

    assert response.status_code == 200
    body = response.json()["scout"]
    assert body["status"] == "REJECTED"
    assert body["rejection_reason"] == "Schedule conflict"
    assert body["responded_at"] is not None

    notification = db_session.execute(
        select(Notification).where(Notification.user_id == company_user.id)
    ).scalar_one()
    assert notification.type == NotificationType.scout_rejected

    db_session.refresh(project)
    assert project.matched_influencer_id is None


def test_scout_listing_filters_by_role_and_status(
    client, db_session, company_user, influencer_user, make_influencer_user, project, headers_for
):
    other = make_influencer_user("second@example.com", "Second")
    accepted = scout_service.send_scout_invitation(
        db_session, company_user, project.id, influencer_user.influencer.id, None
    )
    scout_service.send_scout_invitation(
        db_session, company_user, project.id, other.influencer.id, None
    )
    scout_service.accept_scout(db_session, influencer_user, accepted.id)

    sent = client.get("/api/scouts/my/sent", headers=headers_for(company_user))
    assert len(sent.json()["scouts"]) == 2

    pending = client.get(
        "/api/scouts/my/sent",
        params={"status": "PENDING"},
        headers=headers_for(company_user),
    )
    assert [s["influencer_id"] for s in pending.json()["scouts"]] == [other.influencer.id]

    invitations = client.get(
        "/api/scouts/my/invitations", headers=headers_for(influencer_user)
    )
    assert [s["id"] for s in invitations.json()["scouts"]] == [accepted.id]

    wrong_role = client.get("/api/scouts/my/invitations", headers=headers_for(company_user))
    assert wrong_role.status_code == 403


def test_accepting_scouts_matches_project_last_accept_wins(
    client, db_session, company_user, influencer_user, make_influencer_user, project, headers_for
):
    x = influencer_user
    y = make_influencer_user("y@example.com", "Yuki")

    scout_x = client.post(
        "/api/scouts",
        json={"project_id": project.id, "influencer_id": x.influencer.id},
        headers=headers_for(company_user),
    ).json()["scout"]
    accepted_x = client.put(
        f"/api/scouts/{scout_x['id']}/accept", headers=headers_for(x)
    )
    assert accepted_x.status_code == 200
    assert accepted_x.json()["scout"]["status"] == ScoutStatus.accepted

    db_session.refresh(project)
    assert project.matched_influencer_id == x.influencer.id

    scout_y = client.post(
        "/api/scouts",
        json={"project_id": project.id, "influencer_id": y.influencer.id},
        headers=headers_for(company_user),
    ).json()["scout"]
    client.put(f"/api/scouts/{scout_y['id']}/accept", headers=headers_for(y))

    db_session.refresh(project)
    assert project.matched_influencer_id == y.influencer.id

    accepted_notifications = db_session.execute(
        select(Notification).where(
            Notification.user_id == company_user.id,
            Notification.type == NotificationType.scout_accepted,
        )
    ).scalars()
    assert len(list(accepted_notifications)) == 2


def test_duplicate_scout_service_raises_conflict(db_session, company_user, influencer_user, project):
    scout_service.send_scout_invitation(
        db_session, company_user, project.id, influencer_user.influencer.id, None
    )

    with pytest.raises(Conflict):
        scout_service.send_scout_invitation(
            db_session, company_user, project.id, influencer_user.influencer.id, "again"
        )
