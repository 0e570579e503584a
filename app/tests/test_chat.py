from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.models.notifications import Notification
from app.models.projects import Project
from app.schemas.notifications import NotificationType
from app.schemas.projects import ProjectCreate, ProjectStatus
from app.services import chat_service, project_service


def _create_project(db_session, company_user, title="Autumn review") -> Project:
    start = date.today() + timedelta(days=1)
    return project_service.create_project(
        db_session,
        company_user.company,
        ProjectCreate(
            title=title,
            description="Product review video",
            category="tech",
            budget=20000,
            start_date=start,
            end_date=start + timedelta(days=10),
        ),
    )


@pytest.fixture
def project(db_session, company_user, influencer_user) -> Project:
    project = _create_project(db_session, company_user)
    project.matched_influencer_id = influencer_user.influencer.id
    project.status = ProjectStatus.matched
    db_session.commit()
    return project


def _send(client, headers, project_id, content):
    return client.post(
        f"/api/chat/{project_id}/messages", json={"content": content}, headers=headers
    )


def test_participants_exchange_messages(
    client, db_session, company_user, influencer_user, project, headers_for
):
    sent = _send(client, headers_for(company_user), project.id, "Hello Mika")
    assert sent.status_code == 201
    assert sent.json()["sender_id"] == company_user.id
    assert sent.json()["receiver_id"] == influencer_user.id
    assert sent.json()["is_read"] is False

    reply = _send(client, headers_for(influencer_user), project.id, "Hi Acme")
    assert reply.json()["receiver_id"] == company_user.id

    response = client.get(
        f"/api/chat/{project.id}/messages", headers=headers_for(influencer_user)
    )
    assert response.status_code == 200
    assert [m["content"] for m in response.json()["messages"]] == [
        "Hello Mika",
        "Hi Acme",
    ]

    notification = db_session.execute(
        select(Notification).where(Notification.user_id == influencer_user.id)
    ).scalar_one()
    assert notification.type == NotificationType.message_received
    assert notification.title == "New message on Autumn review"
    assert notification.data == {
        "project_id": project.id,
        "message_id": sent.json()["id"],
    }


def test_outsiders_cannot_read_or_write_the_chat(
    client,
    project,
    make_company_user,
    make_influencer_user,
    admin_user,
    headers_for,
):
    outsiders = [
        make_company_user("rival@example.com", "Rival"),
        make_influencer_user("stranger@example.com", "Stranger"),
        admin_user,
    ]

    for outsider in outsiders:
        headers = headers_for(outsider)
        assert _send(client, headers, project.id, "let me in").status_code == 403
        assert client.get(
            f"/api/chat/{project.id}/messages", headers=headers
        ).status_code == 403
        assert client.put(
            f"/api/chat/{project.id}/read", headers=headers
        ).status_code == 403


def test_unmatched_project_has_no_one_to_write_to(
    client, db_session, company_user, influencer_user, headers_for
):
    open_project = _create_project(db_session, company_user, "Still open")

    from_company = _send(client, headers_for(company_user), open_project.id, "Anyone?")
    assert from_company.status_code == 400
    assert from_company.json()["kind"] == "bad_request"

    from_influencer = _send(
        client, headers_for(influencer_user), open_project.id, "Me!"
    )
    assert from_influencer.status_code == 403


def test_missing_project_and_blank_message(client, company_user, project, headers_for):
    headers = headers_for(company_user)

    assert _send(client, headers, 9999, "Hello").status_code == 404
    assert _send(client, headers, project.id, "   ").status_code == 422


def test_unread_counts_and_mark_as_read(
    client, company_user, influencer_user, project, headers_for
):
    company_headers = headers_for(company_user)
    influencer_headers = headers_for(influencer_user)
    _send(client, company_headers, project.id, "First brief")
    _send(client, company_headers, project.id, "Second brief")

    def unread(headers):
        return client.get("/api/chat/unread-count", headers=headers).json()["count"]

    assert unread(influencer_headers) == 2
    assert unread(company_headers) == 0

    # Reading your own sent messages marks nothing.
    noop = client.put(f"/api/chat/{project.id}/read", headers=company_headers)
    assert noop.json() == {"updated": 0}
    assert unread(influencer_headers) == 2

    marked = client.put(f"/api/chat/{project.id}/read", headers=influencer_headers)
    assert marked.status_code == 200
    assert marked.json() == {"updated": 2}
    assert unread(influencer_headers) == 0

    messages = client.get(
        f"/api/chat/{project.id}/messages", headers=influencer_headers
    ).json()["messages"]
    assert all(m["is_read"] and m["read_at"] is not None for m in messages)

    again = client.put(f"/api/chat/{project.id}/read", headers=influencer_headers)
    assert again.json() == {"updated": 0}


def test_chat_list_shows_counterpart_and_unread(
    client, db_session, company_user, influencer_user, project, headers_for
):
    _create_project(db_session, company_user, "Unmatched")
    _send(client, headers_for(company_user), project.id, "Welcome aboard")

    influencer_view = client.get("/api/chat/list", headers=headers_for(influencer_user))
    assert influencer_view.status_code == 200
    (chat,) = influencer_view.json()["chats"]
    assert chat["project_id"] == project.id
    assert chat["project_title"] == "Autumn review"
    assert chat["counterpart_user_id"] == company_user.id
    assert chat["counterpart_name"] == "Acme Inc"
    assert chat["last_message"]["content"] == "Welcome aboard"
    assert chat["unread_count"] == 1

    company_view = client.get("/api/chat/list", headers=headers_for(company_user))
    (chat,) = company_view.json()["chats"]
    assert chat["counterpart_name"] == "Mika"
    assert chat["unread_count"] == 0


def test_chat_list_is_not_for_admins(client, admin_user, headers_for):
    response = client.get("/api/chat/list", headers=headers_for(admin_user))

    assert response.status_code == 403


def test_messages_are_paged_newest_first(db_session, company_user, project):
    for n in range(1, 4):
        chat_service.send_message(db_session, company_user, project.id, f"note {n}")

    latest = chat_service.get_messages(db_session, company_user, project.id, 1, 2)
    older = chat_service.get_messages(db_session, company_user, project.id, 2, 2)

    assert [m.content for m in latest] == ["note 2", "note 3"]
    assert [m.content for m in older] == ["note 1"]
