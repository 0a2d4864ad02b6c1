import pytest
from fastapi import status

from app.core.exceptions import NotFoundError, ValidationError
from app.services.notification import NotificationService


def _notify(db_session, user, title="Hello"):
    return NotificationService.create_notification(db_session, user.id, title, "Body text")


def test_list_newest_first(db_session, employee):
    first = _notify(db_session, employee, "First")
    second = _notify(db_session, employee, "Second")
    listed = NotificationService.list_for_user(db_session, employee.id)
    assert [n.id for n in listed] == [second.id, first.id]


def test_create_for_missing_user(db_session):
    with pytest.raises(NotFoundError):
        NotificationService.create_notification(db_session, 404, "Title", "Body")


def test_mark_read_only_touches_own_rows(db_session, employee, other_employee):
    mine = _notify(db_session, employee)
    theirs = _notify(db_session, other_employee)

    assert NotificationService.mark_read(db_session, employee.id, [mine.id, theirs.id]) == 1
    assert NotificationService.unread_count(db_session, employee.id) == 0
    assert NotificationService.unread_count(db_session, other_employee.id) == 1


def test_mark_read_other_users_ids_is_noop(db_session, employee, other_employee):
    theirs = _notify(db_session, other_employee)
    assert NotificationService.mark_read(db_session, employee.id, [theirs.id]) == 0


@pytest.mark.parametrize("ids", [[], None, "1,2", 3])
def test_mark_read_rejects_bad_ids(db_session, employee, ids):
    with pytest.raises(ValidationError):
        NotificationService.mark_read(db_session, employee.id, ids)


def test_api_flow(client, db_session, employee, login_as):
    _notify(db_session, employee, "A")
    _notify(db_session, employee, "B")
    login_as(employee)

    assert client.get("/api/notifications/unread-count").json() == {"unreadCount": 2}

    listed = client.get("/api/notifications").json()
    assert listed[0]["title"] == "B"
    assert listed[0]["isRead"] is False

    response = client.post("/api/notifications/mark-read", json={"notificationIds": [listed[0]["id"]]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["count"] == 1

    assert client.get("/api/notifications/unread-count").json() == {"unreadCount": 1}
    assert len(client.get("/api/notifications", params={"unread_only": True}).json()) == 1


def test_api_mark_read_empty_list(client, employee, login_as):
    response = login_as(employee).post("/api/notifications/mark-read", json={"notificationIds": []})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Invalid notification IDs"}


def test_api_create_notification(client, employee, other_employee, login_as):
    login_as(employee)
    response = client.post(
        "/api/notifications",
        json={"userId": other_employee.id, "title": "Ping", "message": "Lunch?", "type": "info"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["title"] == "Ping"

    missing = client.post("/api/notifications", json={"userId": other_employee.id, "title": "Ping"})
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json() == {"error": "Missing required fields"}

    unknown = client.post(
        "/api/notifications",
        json={"userId": 999, "title": "Ping", "message": "Lunch?", "type": "info"},
    )
    assert unknown.status_code == status.HTTP_404_NOT_FOUND
