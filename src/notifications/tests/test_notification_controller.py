from uuid import uuid4

import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client
from django.utils import timezone

from accounts.models import EventHubUser
from conftest import EventHubUserFactory
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def make_notification(user: EventHubUser, **kwargs: object) -> Notification:
    kwargs.setdefault("notification_type", NotificationType.REGISTRATION_CONFIRMED)
    kwargs.setdefault("title", "Registration Confirmed ✅")
    return Notification.objects.create(user=user, **kwargs)


class TestNotificationInbox:
    def test_lists_only_own_notifications(
        self, user_client: Client, user: EventHubUser, user_factory: EventHubUserFactory
    ) -> None:
        mine = make_notification(user)
        make_notification(user_factory())

        response = user_client.get(reverse("api:list_notifications"))

        assert response.status_code == 200
        assert [n["id"] for n in response.json()["results"]] == [str(mine.id)]

    def test_filters(self, user_client: Client, user: EventHubUser) -> None:
        make_notification(user, read_at=timezone.now())
        unread = make_notification(user, notification_type=NotificationType.WAITLIST_JOINED)

        unread_only = user_client.get(reverse("api:list_notifications"), {"unread_only": True}).json()
        by_type = user_client.get(
            reverse("api:list_notifications"), {"notification_type": NotificationType.WAITLIST_JOINED.value}
        ).json()

        assert [n["id"] for n in unread_only["results"]] == [str(unread.id)]
        assert [n["id"] for n in by_type["results"]] == [str(unread.id)]

    def test_filter_by_event(self, user_client: Client, user: EventHubUser) -> None:
        event_id = uuid4()
        about_event = make_notification(user, context={"event_id": str(event_id), "event_title": "Intro to Django"})
        make_notification(user, context={"event_id": str(uuid4())})
        make_notification(user)

        response = user_client.get(reverse("api:list_notifications"), {"event_id": str(event_id)})

        assert response.status_code == 200
        assert [n["id"] for n in response.json()["results"]] == [str(about_event.id)]

    def test_unread_count(self, user_client: Client, user: EventHubUser) -> None:
        make_notification(user)
        make_notification(user)
        make_notification(user, read_at=timezone.now())

        response = user_client.get(reverse("api:unread_count"))

        assert response.json() == {"count": 2}

    def test_mark_read_and_unread(self, user_client: Client, user: EventHubUser) -> None:
        notification = make_notification(user)

        response = user_client.post(
            reverse("api:mark_notification_read", kwargs={"notification_id": notification.id})
        )
        assert response.status_code == 200
        assert response.json()["read_at"] is not None

        response = user_client.post(
            reverse("api:mark_notification_unread", kwargs={"notification_id": notification.id})
        )
        assert response.status_code == 200
        notification.refresh_from_db()
        assert notification.read_at is None

    def test_cannot_touch_other_users_notifications(
        self, user_client: Client, user_factory: EventHubUserFactory
    ) -> None:
        other = make_notification(user_factory())

        response = user_client.post(reverse("api:mark_notification_read", kwargs={"notification_id": other.id}))

        assert response.status_code == 404
        other.refresh_from_db()
        assert other.read_at is None

    def test_mark_all_read(self, user_client: Client, user: EventHubUser) -> None:
        make_notification(user)
        make_notification(user)

        response = user_client.post(reverse("api:mark_all_read"))

        assert response.json() == {"updated": 2}
        assert not Notification.objects.filter(user=user).unread().exists()

    def test_requires_authentication(self, client: Client) -> None:
        assert client.get(reverse("api:list_notifications")).status_code == 401
