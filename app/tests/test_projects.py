from datetime import date, timedelta

from sqlalchemy import select

from app.models.notifications import Notification
from app.models.projects import Application
from app.schemas.notifications import NotificationType
from app.schemas.projects import ProjectStatus


def _project_payload(**overrides):
    start = date.today() + timedelta(days=7)
    payload = {
        "title": "Spring campaign",
        "description": "Short videos for our spring line.",
        "category": "beauty",
        "budget": 50000,
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=30)).isoformat(),
    }
    payload.update(overrides)
    return payload


def _create_project(client, company_user, headers_for, **overrides):
    response = client.post(
        "/api/projects",
        json=_project_payload(**overrides),
        headers=headers_for(company_user),
    )
    assert response.status_code == 201
    return response.json()


def test_company_creates_and_lists_projects(client, company_user, headers_for):
    project = _create_project(client, company_user, headers_for)

    assert project["status"] == "PENDING"
    assert project["matched_influencer_id"] is None

    listed = client.get("/api/projects/mine", headers=headers_for(company_user))
    assert [p["id"] for p in listed.json()] == [project["id"]]


def test_project_validation(client, company_user, influencer_user, headers_for):
    low_budget = client.post(
        "/api/projects",
        json=_project_payload(budget=500),
        headers=headers_for(company_user),
    )
    assert low_budget.status_code == 422

    yesterday = date.today() - timedelta(days=1)
    past = client.post(
        "/api/projects",
        json=_project_payload(
            start_date=yesterday.isoformat(),
            end_date=(yesterday + timedelta(days=10)).isoformat(),
        ),
        headers=headers_for(company_user),
    )
    assert past.status_code == 400

    not_company = client.post(
        "/api/projects", json=_project_payload(), headers=headers_for(influencer_user)
    )
    assert not_company.status_code == 403


def test_apply_and_accept_matches_project(
    client, db_session, company_user, influencer_user, headers_for
):
    project = _create_project(client, company_user, headers_for)

    applied = client.post(
        f"/api/projects/{project['id']}/apply",
        json={"message": "I love this brand", "proposed_price": 40000},
        headers=headers_for(influencer_user),
    )
    assert applied.status_code == 201
    application_id = applied.json()["id"]

    duplicate = client.post(
        f"/api/projects/{project['id']}/apply",
        json={},
        headers=headers_for(influencer_user),
    )
    assert duplicate.status_code == 409

    received = client.get(
        "/api/projects/applications/received", headers=headers_for(company_user)
    )
    assert [a["id"] for a in received.json()] == [application_id]

    accepted = client.put(
        f"/api/projects/applications/{application_id}/accept",
        headers=headers_for(company_user),
    )
    assert accepted.status_code == 200
    assert accepted.json()["is_accepted"] is True

    matched = client.get(
        f"/api/projects/{project['id']}", headers=headers_for(influencer_user)
    ).json()
    assert matched["status"] == ProjectStatus.matched
    assert matched["matched_influencer_id"] == influencer_user.influencer.id

    types = set(
        db_session.execute(
            select(Notification.type).where(Notification.user_id == influencer_user.id)
        ).scalars()
    )
    assert types == {NotificationType.application_accepted, NotificationType.project_matched}

    again = client.put(
        f"/api/projects/applications/{application_id}/accept",
        headers=headers_for(company_user),
    )
    assert again.status_code == 400


def test_only_owner_manages_applications(
    client, db_session, company_user, influencer_user, make_company_user, headers_for
):
    project = _create_project(client, company_user, headers_for)
    applied = client.post(
        f"/api/projects/{project['id']}/apply",
        json={},
        headers=headers_for(influencer_user),
    ).json()
    rival = make_company_user("rival@example.com", "Rival")

    forbidden = client.put(
        f"/api/projects/applications/{applied['id']}/accept",
        headers=headers_for(rival),
    )
    assert forbidden.status_code == 403

    rejected = client.delete(
        f"/api/projects/applications/{applied['id']}",
        headers=headers_for(company_user),
    )
    assert rejected.status_code == 204
    assert db_session.get(Application, applied["id"]) is None
