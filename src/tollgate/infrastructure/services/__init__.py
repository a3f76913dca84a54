"""Outbound service integrations."""

from tollgate.infrastructure.services.notification_service import (
    EmailNotificationDispatcher,
    build_email_provider,
)

__all__ = ["EmailNotificationDispatcher", "build_email_provider"]
