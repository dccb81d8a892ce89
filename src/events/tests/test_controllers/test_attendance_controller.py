from datetime import timedelta

import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client
from django.utils import timezone

from accounts.models import EventHubUser
from conftest import EventFactory, EventHubUserFactory, make_auth_client
from events.models import Comment, Event, Rating, Registration

pytestmark = pytest.mark.django_db


@pytest.fixture
def past_event(completed_event: Event, user: EventHubUser) -> Event:
    """A completed event the student attended."""
    Registration.objects.create(event=completed_event, user=user, status=Registration.Status.REGISTERED)
    return completed_event


class TestRegister:
    def test_register_with_free_seat(self, user_client: Client, user: EventHubUser, event: Event) -> None:
        response = user_client.post(reverse("api:register_for_event", kwargs={"event_id": event.id}))

        assert response.status_code == 200, response.content
        data = response.json()
        assert data["status"] == "REGISTERED"
        assert data["event_id"] == str(event.id)
        assert Registration.objects.filter(event=event, user=user, status=Registration.Status.REGISTERED).exists()

    def test_register_on_full_event_joins_waitlist(
        self, user_client: Client, event_factory: EventFactory, user_factory: EventHubUserFactory
    ) -> None:
        event = event_factory(max_participants=1)
        Registration.objects.create(event=event, user=user_factory(), status=Registration.Status.REGISTERED)

        response = user_client.post(reverse("api:register_for_event", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        assert response.json()["status"] == "WAITLIST"

    def test_duplicate_registration(self, user_client: Client, event: Event) -> None:
        url = reverse("api:register_for_event", kwargs={"event_id": event.id})
        user_client.post(url)

        response = user_client.post(url)

        assert response.status_code == 400
        assert response.json()["detail"] == "You are already registered or waitlisted for this event."

    def test_deadline_passed(self, user_client: Client, event_factory: EventFactory) -> None:
        event = event_factory(
            event_date=timezone.now() + timedelta(hours=3),
            registration_deadline=timezone.now() - timedelta(minutes=1),
        )

        response = user_client.post(reverse("api:register_for_event", kwargs={"event_id": event.id}))

        assert response.status_code == 400
        assert response.json()["detail"] == "The registration deadline has passed."

    def test_suspended_event(self, user_client: Client, event_factory: EventFactory) -> None:
        event = event_factory(status=Event.Status.SUSPENDED)

        response = user_client.post(reverse("api:register_for_event", kwargs={"event_id": event.id}))

        assert response.status_code == 400

    def test_requires_authentication(self, client: Client, event: Event) -> None:
        response = client.post(reverse("api:register_for_event", kwargs={"event_id": event.id}))

        assert response.status_code == 401

    def test_unknown_event(self, user_client: Client) -> None:
        url = reverse("api:register_for_event", kwargs={"event_id": "00000000-0000-0000-0000-000000000000"})

        assert user_client.post(url).status_code == 404


class TestCancel:
    def test_cancel_promotes_waitlist(
        self,
        user_client: Client,
        user: EventHubUser,
        event_factory: EventFactory,
        user_factory: EventHubUserFactory,
    ) -> None:
        event = event_factory(max_participants=1, status=Event.Status.FULL)
        Registration.objects.create(event=event, user=user, status=Registration.Status.REGISTERED)
        waiting = Registration.objects.create(event=event, user=user_factory(), status=Registration.Status.WAITLIST)

        response = user_client.post(reverse("api:cancel_registration", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        waiting.refresh_from_db()
        assert waiting.status == Registration.Status.REGISTERED

    def test_cancel_without_registration(self, user_client: Client, event: Event) -> None:
        response = user_client.post(reverse("api:cancel_registration", kwargs={"event_id": event.id}))

        assert response.status_code == 404

    def test_cancel_twice(self, user_client: Client, user: EventHubUser, event: Event) -> None:
        Registration.objects.create(event=event, user=user, status=Registration.Status.CANCELLED)

        response = user_client.post(reverse("api:cancel_registration", kwargs={"event_id": event.id}))

        assert response.status_code == 400
        assert response.json()["detail"] == "This registration is already cancelled."

    def test_cancel_after_start(self, user_client: Client, past_event: Event) -> None:
        response = user_client.post(reverse("api:cancel_registration", kwargs={"event_id": past_event.id}))

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot cancel a registration after the event has started."


class TestFeedback:
    def test_attendee_comments(self, user_client: Client, past_event: Event) -> None:
        url = reverse("api:add_event_comment", kwargs={"event_id": past_event.id})

        response = user_client.post(url, data={"message": "Loved the demos."}, content_type="application/json")

        assert response.status_code == 201
        assert response.json()["message"] == "Loved the demos."
        assert Comment.objects.filter(event=past_event).count() == 1

    def test_comment_too_short(self, user_client: Client, past_event: Event) -> None:
        url = reverse("api:add_event_comment", kwargs={"event_id": past_event.id})

        response = user_client.post(url, data={"message": "ok"}, content_type="application/json")

        assert response.status_code == 422

    def test_non_attendee_cannot_comment(
        self, past_event: Event, user_factory: EventHubUserFactory
    ) -> None:
        stranger = make_auth_client(user_factory())
        url = reverse("api:add_event_comment", kwargs={"event_id": past_event.id})

        response = stranger.post(url, data={"message": "Sounds great!"}, content_type="application/json")

        assert response.status_code == 400

    def test_anyone_can_read_comments(self, client: Client, past_event: Event, user: EventHubUser) -> None:
        Comment.objects.create(event=past_event, user=user, message="Great session")

        response = client.get(reverse("api:list_event_comments", kwargs={"event_id": past_event.id}))

        assert response.status_code == 200
        assert response.json()["results"][0]["message"] == "Great session"

    def test_rate_and_rerate(self, user_client: Client, past_event: Event, user: EventHubUser) -> None:
        url = reverse("api:rate_event", kwargs={"event_id": past_event.id})

        user_client.post(url, data={"stars": 2}, content_type="application/json")
        response = user_client.post(url, data={"stars": 5}, content_type="application/json")

        assert response.status_code == 200
        assert response.json()["stars"] == 5
        assert Rating.objects.get(event=past_event, user=user).stars == 5

    @pytest.mark.parametrize("stars", [0, 6])
    def test_rating_out_of_range(self, user_client: Client, past_event: Event, stars: int) -> None:
        url = reverse("api:rate_event", kwargs={"event_id": past_event.id})

        response = user_client.post(url, data={"stars": stars}, content_type="application/json")

        assert response.status_code == 422

    def test_rating_before_completion(self, user_client: Client, user: EventHubUser, event: Event) -> None:
        Registration.objects.create(event=event, user=user, status=Registration.Status.REGISTERED)
        url = reverse("api:rate_event", kwargs={"event_id": event.id})

        response = user_client.post(url, data={"stars": 4}, content_type="application/json")

        assert response.status_code == 400
        assert response.json()["detail"] == "Feedback opens once the event has completed."
