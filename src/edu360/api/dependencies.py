"""
FastAPI dependencies.

Services are built once in the application lifespan and kept on
`app.state`; endpoints receive them through these providers so tests
can swap them with `app.dependency_overrides`.
"""

from fastapi import Request

from edu360.config.settings import Settings
from edu360.infrastructure.store.base import EventStore
from edu360.services.chat.chat_service import ChatService
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.notifications.broadcaster import NotificationBroadcaster
from edu360.services.sentiment.classifier import SentimentClassifier
from edu360.services.wellness.wellness_service import WellnessService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> EventStore:
    return request.app.state.store


def get_broadcaster(request: Request) -> NotificationBroadcaster:
    return request.app.state.broadcaster


def get_classifier(request: Request) -> SentimentClassifier:
    return request.app.state.classifier


def get_wellness_service(request: Request) -> WellnessService:
    return request.app.state.wellness_service


def get_dashboard_queries(request: Request) -> DashboardQueries:
    return request.app.state.dashboard_queries


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service
