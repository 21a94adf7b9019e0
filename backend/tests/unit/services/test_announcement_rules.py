"""
Unit Tests for announcement visibility and ordering
"""
from datetime import datetime, timedelta

from app.core.types import utc_now
from app.models.announcement import Announcement
from app.services.announcement_service import sort_announcements


def make_announcement(**overrides):
    fields = dict(
        title="Exam schedule",
        content="Posted on the notice board",
        category="academic",
        target_audience=["student", "lecturer"],
        is_pinned=False,
        expires_at=None,
        is_department_specific=False,
        target_departments=[],
    )
    fields.update(overrides)
    return Announcement(**fields)


class TestVisibility:

    def test_audience_must_include_role(self):
        announcement = make_announcement(target_audience=["lecturer"])

        assert announcement.is_visible_to("lecturer")
        assert not announcement.is_visible_to("student")

    def test_admin_not_in_audience(self):
        announcement = make_announcement(target_audience=["student"])

        assert not announcement.is_visible_to("admin")

    def test_expired_hidden(self):
        now = utc_now()
        announcement = make_announcement(target_audience=["lecturer"], expires_at=now - timedelta(days=1))

        assert not announcement.is_visible_to("lecturer", now=now)

    def test_future_expiry_visible(self):
        now = utc_now()
        announcement = make_announcement(target_audience=["lecturer"], expires_at=now + timedelta(days=1))

        assert announcement.is_visible_to("lecturer", now=now)

    def test_department_specific(self):
        announcement = make_announcement(
            is_department_specific=True, target_departments=["Computer Science"]
        )

        assert announcement.is_visible_to("student", "Computer Science")
        assert not announcement.is_visible_to("student", "Physics")

    def test_department_specific_without_departments_reaches_everyone(self):
        announcement = make_announcement(is_department_specific=True, target_departments=[])

        assert announcement.is_visible_to("student", "Physics")

    def test_admin_ignores_department_filter(self):
        announcement = make_announcement(
            target_audience=["admin"], is_department_specific=True, target_departments=["Physics"]
        )

        assert announcement.is_visible_to("admin", None)


class TestSorting:

    def test_pinned_first_then_newest(self):
        items = [
            {"id": "old", "is_pinned": False, "created_at": datetime(2024, 1, 1)},
            {"id": "pinned-old", "is_pinned": True, "created_at": datetime(2023, 12, 1)},
            {"id": "new", "is_pinned": False, "created_at": datetime(2024, 2, 1)},
            {"id": "pinned-new", "is_pinned": True, "created_at": datetime(2024, 1, 15)},
        ]

        assert [a["id"] for a in sort_announcements(items)] == ["pinned-new", "pinned-old", "new", "old"]
