"""Tests for the Notification model, default ordering and duplicate matching."""

import pytest

from noticore.config import NotiConfig
from noticore.lifecycle.notification import (
    CloseReason,
    FullscreenMode,
    Notification,
    Urgency,
    format_record,
    is_duplicate,
    make_comparator,
)


@pytest.fixture
def config():
    return NotiConfig(default_timeout=8.0, critical_timeout=0.0)


class TestCreate:
    def test_message_combines_summary_and_body(self, config):
        n = Notification.create("Backup", "Completed in 3m", config=config, clock=lambda: 5.0)
        assert n.msg == "Backup Completed in 3m"
        assert n.timestamp == 5.0
        assert n.id == 0

    def test_empty_summary_and_body_give_empty_message(self, config):
        n = Notification.create("", "", config=config)
        assert n.msg == ""

    def test_timeout_from_urgency(self, config):
        normal = Notification.create("a", config=config)
        critical = Notification.create("b", urgency=Urgency.CRITICAL, config=config)
        assert normal.timeout == 8.0
        assert critical.timeout == 0.0

    def test_explicit_fields_win(self, config):
        n = Notification.create(
            "a", config=config, timeout=2.5, msg="custom", id=7, timestamp=1.0,
        )
        assert n.timeout == 2.5
        assert n.msg == "custom"
        assert n.id == 7
        assert n.timestamp == 1.0

    def test_urgency_accepts_int(self, config):
        n = Notification.create("a", urgency=2, config=config)
        assert n.urgency is Urgency.CRITICAL

    def test_defaults(self, config):
        n = Notification.create("a", config=config)
        assert n.dup_count == 1
        assert n.progress == -1
        assert n.start == 0
        assert n.fullscreen is FullscreenMode.SHOW
        assert not n.redisplayed
        assert not n.history_ignore
        assert n.script is None

    def test_age(self):
        n = Notification(summary="a", timestamp=100.0)
        assert n.age(130.0) == 30.0


class TestComparator:
    def test_more_urgent_first(self):
        compare = make_comparator()
        critical = Notification(id=9, urgency=Urgency.CRITICAL)
        low = Notification(id=2, urgency=Urgency.LOW)
        assert compare(critical, low) < 0
        assert compare(low, critical) > 0

    def test_same_urgency_orders_by_id(self):
        compare = make_comparator()
        assert compare(Notification(id=2), Notification(id=3)) < 0

    def test_unsorted_ignores_urgency(self):
        compare = make_comparator(sort=False)
        critical = Notification(id=9, urgency=Urgency.CRITICAL)
        low = Notification(id=2, urgency=Urgency.LOW)
        assert compare(low, critical) < 0


class TestIsDuplicate:
    def test_same_content(self):
        a = Notification(appname="mail", summary="New", body="hi", icon="m.png")
        b = Notification(appname="mail", summary="New", body="hi", icon="m.png", id=5)
        assert is_duplicate(a, b)

    @pytest.mark.parametrize("field,value", [
        ("appname", "chat"),
        ("summary", "Old"),
        ("body", "bye"),
        ("icon", "x.png"),
        ("urgency", Urgency.CRITICAL),
    ])
    def test_any_difference_breaks_match(self, field, value):
        a = Notification(appname="mail", summary="New", body="hi", icon="m.png")
        b = Notification(appname="mail", summary="New", body="hi", icon="m.png")
        setattr(b, field, value)
        assert not is_duplicate(a, b)

    def test_progress_is_ignored(self):
        assert is_duplicate(Notification(summary="a", progress=1), Notification(summary="a", progress=90))


class TestIdentity:
    def test_equal_fields_are_distinct_notifications(self):
        """Queues track notifications by identity, not value."""
        assert Notification(summary="a") != Notification(summary="a")


class TestFormatRecord:
    def test_contains_core_fields(self):
        n = Notification(summary="Disk", body="90% full", id=4, urgency=Urgency.CRITICAL)
        record = format_record(n)
        assert "summary: 'Disk'" in record
        assert "body: '90% full'" in record
        assert "urgency: critical" in record
        assert "id: 4" in record
        assert record.startswith("{") and record.endswith("}")


class TestCloseReason:
    def test_wire_values(self):
        assert CloseReason.TIME == 1
        assert CloseReason.USER == 2
        assert CloseReason.SIGNALED == 3
        assert CloseReason.REPLACED == 4
