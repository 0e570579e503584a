from app.schemas.notifications import NotificationType
from app.services import notification_service


def _notify(db_session, user, title="Hello", type_=NotificationType.system):
    notification = notification_service.create_notification(
        db_session, user.id, type_, title, f"{title} body", {"source": "test"}
    )
    db_session.commit()
    return notification


def test_create_notification_is_staged_until_commit(db_session, influencer_user):
    notification = notification_service.create_notification(
        db_session,
        influencer_user.id,
        NotificationType.system,
        "Welcome",
        "Thanks for joining",
    )

    assert notification.id is None
    db_session.commit()
    assert notification.id is not None
    assert notification.is_read is False


def test_list_paginates_newest_first(client, db_session, influencer_user, headers_for):
    for i in range(3):
        _notify(db_session, influencer_user, title=f"n{i}")

    first_page = client.get(
        "/api/notifications",
        params={"page": 1, "limit": 2},
        headers=headers_for(influencer_user),
    ).json()
    second_page = client.get(
        "/api/notifications",
        params={"page": 2, "limit": 2},
        headers=headers_for(influencer_user),
    ).json()

    assert first_page["total"] == 3
    assert first_page["unread_count"] == 3
    assert [n["title"] for n in first_page["notifications"]] == ["n2", "n1"]
    assert [n["title"] for n in second_page["notifications"]] == ["n0"]
    assert second_page["page"] == 2


def test_mark_read_and_unread_filter(client, db_session, influencer_user, headers_for):
    headers = headers_for(influencer_user)
    read = _notify(db_session, influencer_user, title="read me")
    _notify(db_session, influencer_user, title="keep")

    response = client.put(f"/api/notifications/{read.id}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert response.json()["read_at"] is not None

    unread = client.get(
        "/api/notifications", params={"unread_only": True}, headers=headers
    ).json()
    assert [n["title"] for n in unread["notifications"]] == ["keep"]
    assert unread["unread_count"] == 1

    count = client.get("/api/notifications/unread-count", headers=headers)
    assert count.json() == {"count": 1}


def test_read_all(client, db_session, influencer_user, company_user, headers_for):
    _notify(db_session, influencer_user)
    _notify(db_session, influencer_user)
    _notify(db_session, company_user)

    response = client.put("/api/notifications/read-all", headers=headers_for(influencer_user))

    assert response.json() == {"updated": 2}
    assert notification_service.get_unread_count(db_session, influencer_user) == 0
    assert notification_service.get_unread_count(db_session, company_user) == 1


def test_other_users_notifications_are_not_found(
    client, db_session, influencer_user, company_user, headers_for
):
    notification = _notify(db_session, company_user)

    read = client.put(
        f"/api/notifications/{notification.id}/read",
        headers=headers_for(influencer_user),
    )
    deleted = client.delete(
        f"/api/notifications/{notification.id}",
        headers=headers_for(influencer_user),
    )

    assert read.status_code == 404
    assert deleted.status_code == 404


def test_delete_notification(client, db_session, influencer_user, headers_for):
    notification = _notify(db_session, influencer_user)

    response = client.delete(
        f"/api/notifications/{notification.id}", headers=headers_for(influencer_user)
    )

    assert response.status_code == 204
    listed = client.get("/api/notifications", headers=headers_for(influencer_user))
    assert listed.json()["total"] == 0


def test_notifications_require_auth(client):
    assert client.get("/api/notifications").status_code == 401
