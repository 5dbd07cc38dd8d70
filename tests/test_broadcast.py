"""Tests for the best-effort broadcast sender."""

from __future__ import annotations

import pytest

from cdstock.application.use_cases.notifications import (
    broadcast,
    broadcast_notification,
    list_notifications,
    mark_notification_read,
    resolve_recipients,
)
from cdstock.domain.entities import (
    BroadcastTarget,
    BroadcastTemplate,
    NotificationCategory,
    NotificationPriority,
    UserRole,
)
from cdstock.domain.errors import AuthorizationError, BackendError, ValidationError

MAINTENANCE = BroadcastTemplate(
    title="Maintenance",
    body="System down 10pm",
    priority=NotificationPriority.HIGH,
)


@pytest.fixture()
def staff(make_user):
    return {
        "admin": make_user("admin", role=UserRole.ADMIN),
        "root": make_user("root", role=UserRole.SUPER),
        "alice": make_user("alice"),
        "bob": make_user("bob"),
    }


def test_normal_user_cannot_broadcast(session, staff, publisher):
    with pytest.raises(AuthorizationError):
        broadcast_notification(
            session,
            template=MAINTENANCE,
            target=BroadcastTarget.all(),
            sender=staff["alice"],
            publisher=publisher,
        )

    assert list_notifications(session, "bob") == []


def test_empty_template_is_rejected(session, staff, publisher):
    with pytest.raises(ValidationError):
        broadcast_notification(
            session,
            template=BroadcastTemplate(title="", body="x"),
            target=BroadcastTarget.all(),
            sender=staff["admin"],
            publisher=publisher,
        )


def test_all_excludes_sender(session, staff):
    recipients = resolve_recipients(session, target=BroadcastTarget.all(), sender=staff["admin"])

    assert sorted(recipients) == ["alice", "bob", "root"]


def test_admins_only_selects_admin_roles(session, staff):
    recipients = resolve_recipients(
        session, target=BroadcastTarget.admins_only(), sender=staff["root"]
    )

    assert sorted(recipients) == ["admin", "root"]


def test_single_user_must_be_known(session, staff, publisher):
    with pytest.raises(ValidationError):
        broadcast_notification(
            session,
            template=MAINTENANCE,
            target=BroadcastTarget.single_user("ghost"),
            sender=staff["admin"],
            publisher=publisher,
        )


def test_single_user_broadcast(session, staff, publisher):
    summary = broadcast_notification(
        session,
        template=MAINTENANCE,
        target=BroadcastTarget.single_user("bob"),
        sender=staff["admin"],
        publisher=publisher,
    )

    assert (summary.attempted, summary.succeeded) == (1, 1)
    assert [n.title for n in list_notifications(session, "bob")] == ["Maintenance"]
    assert list_notifications(session, "alice") == []


def test_maintenance_broadcast_has_independent_read_state(session, staff, publisher):
    summary = broadcast_notification(
        session,
        template=MAINTENANCE,
        target=BroadcastTarget.all(),
        sender=staff["admin"],
        publisher=publisher,
    )

    assert (summary.attempted, summary.succeeded, summary.failed) == (3, 3, 0)

    alice_notification = list_notifications(session, "alice")[0]
    assert alice_notification.priority is NotificationPriority.HIGH
    assert alice_notification.category is NotificationCategory.ADMIN
    assert alice_notification.sender_id == "admin"

    mark_notification_read(
        session, recipient_id="alice", notification_id=alice_notification.id
    )

    assert list_notifications(session, "alice")[0].is_read is True
    assert list_notifications(session, "bob")[0].is_read is False
    assert list_notifications(session, "root")[0].is_read is False


def test_partial_failure_is_counted_not_raised(session, staff, publisher, monkeypatch):
    real_create = broadcast.create_notification

    def flaky_create(session, *, recipient_id, **kwargs):
        if recipient_id == "bob":
            raise BackendError("Could not create notification: connection reset")
        return real_create(session, recipient_id=recipient_id, **kwargs)

    monkeypatch.setattr(broadcast, "create_notification", flaky_create)

    summary = broadcast_notification(
        session,
        template=MAINTENANCE,
        target=BroadcastTarget.all(),
        sender=staff["admin"],
        publisher=publisher,
    )

    assert (summary.attempted, summary.succeeded) == (3, 2)
    assert list_notifications(session, "bob") == []
    assert len(list_notifications(session, "alice")) == 1
    assert len(list_notifications(session, "root")) == 1


def test_broadcast_pushes_each_recipient(session, staff, publisher, bridge):
    seen: dict[str, list[str]] = {"alice": [], "bob": []}
    bridge.subscribe("alice", lambda row: seen["alice"].append(row["data"]["title"]))
    bridge.subscribe("bob", lambda row: seen["bob"].append(row["data"]["title"]))

    broadcast_notification(
        session,
        template=MAINTENANCE,
        target=BroadcastTarget.all(),
        sender=staff["admin"],
        publisher=publisher,
    )

    assert seen == {"alice": ["Maintenance"], "bob": ["Maintenance"]}
