"""Fixtures shared by every app's tests."""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts.models import EventHubUser
from events.models import Event


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> t.Iterator[None]:
    """Throttling state lives in the cache, so start every test from an empty one."""
    cache.clear()
    yield
    cache.clear()


class EventHubUserFactory:
    """Factory for creating EventHubUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> EventHubUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return EventHubUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> EventHubUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> EventHubUserFactory:
    return EventHubUserFactory()


@pytest.fixture
def user(user_factory: EventHubUserFactory) -> EventHubUser:
    """A student."""
    return user_factory(username="student@example.com", preferred_name="Sam Student")


@pytest.fixture
def host(user_factory: EventHubUserFactory) -> EventHubUser:
    """A user with the HOST role."""
    return user_factory(username="host@example.com", preferred_name="Hana Host", role=EventHubUser.Role.HOST)


@pytest.fixture
def super_admin(user_factory: EventHubUserFactory) -> EventHubUser:
    return user_factory(username="admin@example.com", role=EventHubUser.Role.SUPER_ADMIN, is_staff=True)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )


class EventFactory:
    """Factory for creating events directly in the database, bypassing the service layer."""

    fake = faker.Faker()

    def __init__(self, host: EventHubUser, start: datetime) -> None:
        self.host = host
        self.start = start

    def __call__(self, **kwargs: t.Any) -> Event:
        event_date = kwargs.pop("event_date", self.start)
        kwargs.setdefault("host", self.host)
        kwargs.setdefault("title", self.fake.sentence(nb_words=4)[:200])
        kwargs.setdefault("description", self.fake.paragraph(nb_sentences=3))
        kwargs.setdefault("venue", "Main Auditorium")
        kwargs.setdefault("category", "Tech")
        kwargs.setdefault("registration_deadline", event_date - timedelta(days=1))
        kwargs.setdefault("max_participants", 10)
        return Event.objects.create(event_date=event_date, **kwargs)


@pytest.fixture
def event_factory(host: EventHubUser, next_week: datetime) -> EventFactory:
    return EventFactory(host, next_week)


@pytest.fixture
def event(event_factory: EventFactory) -> Event:
    """An ACTIVE event next week with 10 seats and a deadline the day before."""
    return event_factory(title="Intro to Django")


def make_auth_client(user: EventHubUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: EventHubUser) -> Client:
    """An API client authenticated as the student."""
    return make_auth_client(user)


@pytest.fixture
def host_client(host: EventHubUser) -> Client:
    """An API client authenticated as the host."""
    return make_auth_client(host)


@pytest.fixture
def super_admin_client(super_admin: EventHubUser) -> Client:
    return make_auth_client(super_admin)


@pytest.fixture
def completed_event(event_factory: EventFactory) -> Event:
    """An event that ended two days ago and was swept to COMPLETED."""
    now = timezone.now()
    return event_factory(
        event_date=now - timedelta(days=2),
        registration_deadline=now - timedelta(days=3),
        status=Event.Status.COMPLETED,
    )
