"""Tests configuration and fixtures."""

import asyncio
from typing import Any, Callable, Optional

import pytest

from edu360.config import Settings
from edu360.config.settings import EscalationSettings, OpenAISettings, RealtimeSettings
from edu360.domain.enums.wellness import UserRole
from edu360.domain.models import User
from edu360.infrastructure.llm.provider import (
    ChatPrompt,
    LLMProvider,
    LLMResponse,
)
from edu360.infrastructure.store import MemoryEventStore, StoreUnavailableError, UserDirectory
from edu360.services.escalation import EscalationEngine
from edu360.services.notifications import ChannelMessage, NotificationBroadcaster
from edu360.services.sentiment import SentimentClassifier
from edu360.services.wellness import WellnessService


class FakeProvider(LLMProvider):
    """
    Scripted LLM provider.

    Returns `content`, raises `error`, or sleeps `delay` seconds first.
    Every prompt is recorded in `prompts`.
    """

    def __init__(
        self,
        content: str = "",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        configured: bool = True,
    ) -> None:
        self.content = content
        self.error = error
        self.delay = delay
        self.configured = configured
        self.prompts: list[ChatPrompt] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    async def generate(self, prompt: ChatPrompt, *, model: Optional[str] = None) -> LLMResponse:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, provider="fake", model="fake-model")

    async def health_check(self) -> bool:
        return self.configured

    def is_configured(self) -> bool:
        return self.configured


class FailingStore(MemoryEventStore):
    """Memory store whose inserts (and optionally updates) of the named kinds fail."""

    def __init__(
        self,
        failing_kinds: tuple[str, ...] = ("derived_alerts",),
        failing_updates: tuple[str, ...] = (),
    ) -> None:
        super().__init__()
        self.failing_kinds = failing_kinds
        self.failing_updates = failing_updates

    async def _insert(self, kind: str, record_id: str, data: dict[str, Any]) -> None:
        if kind in self.failing_kinds:
            raise StoreUnavailableError(f"{kind} writes are down")
        await super()._insert(kind, record_id, data)

    async def _patch(self, kind: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        if kind in self.failing_updates:
            raise StoreUnavailableError(f"{kind} updates are down")
        return await super()._patch(kind, record_id, patch)


class Recorder:
    """Broadcaster handler that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[ChannelMessage] = []

    def __call__(self, message: ChannelMessage) -> None:
        self.messages.append(message)

    @property
    def types(self) -> list[str]:
        return [m.type.value for m in self.messages]


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with mock values."""
    return Settings(
        env="development",
        debug=True,
        store_backend="memory",
        seed_sample_data=False,
        openai=OpenAISettings(api_key=""),
        escalation=EscalationSettings(classifier_timeout_seconds=0.5),
        realtime=RealtimeSettings(heartbeat_interval_seconds=1.0),
    )


@pytest.fixture
def fake_provider_factory() -> Callable[..., FakeProvider]:
    return FakeProvider


@pytest.fixture
def recorder_factory() -> Callable[[], Recorder]:
    return Recorder


@pytest.fixture
def failing_store_factory() -> Callable[..., FailingStore]:
    return FailingStore


@pytest.fixture
def store() -> MemoryEventStore:
    return MemoryEventStore()


@pytest.fixture
def broadcaster() -> NotificationBroadcaster:
    return NotificationBroadcaster(queue_size=8)


@pytest.fixture
def classifier() -> SentimentClassifier:
    """Classifier without a provider: always heuristic."""
    return SentimentClassifier(None)


@pytest.fixture
def directory(store) -> UserDirectory:
    return UserDirectory(store)


@pytest.fixture
def engine(store, broadcaster, classifier, directory) -> EscalationEngine:
    return EscalationEngine(store, broadcaster, classifier, directory)


@pytest.fixture
def service(store, broadcaster, engine, directory) -> WellnessService:
    return WellnessService(store, broadcaster, engine, directory)


@pytest.fixture
def make_user(store) -> Callable[..., Any]:
    """Create and store a user; returns a coroutine."""
    counter = iter(range(1, 10_000))

    async def _make_user(role: UserRole = UserRole.STUDENT, **kwargs: Any) -> User:
        n = next(counter)
        user = User(
            email=kwargs.pop("email", f"{role.value}{n}@school.edu"),
            first_name=kwargs.pop("first_name", role.value.title()),
            last_name=kwargs.pop("last_name", str(n)),
            role=role,
            **kwargs,
        )
        await store.create(user)
        return user

    return _make_user
