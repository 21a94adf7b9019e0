"""
Unit Tests for request/response schemas
"""
import pytest
from pydantic import ValidationError
from datetime import datetime

from app.models.user import User, UserRole
from app.schemas.auth import SignupRequest, StatusUpdateRequest, UserResponse, LoginResponse
from app.schemas.announcement import AnnouncementCreate, AnnouncementUpdate
from app.schemas.chat import MarkNotificationsRead, MessageCreate
from app.schemas.forum import ForumPostCreate


class TestSignupRequest:

    def test_missing_fields_allowed_at_schema_level(self):
        """Required fields are enforced by the service so all of them can be reported at once"""
        payload = SignupRequest(email="student@example.com")

        assert payload.name is None
        assert payload.password is None

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest(email="not-an-email")


class TestStatusUpdate:

    def test_is_online_required(self):
        with pytest.raises(ValidationError):
            StatusUpdateRequest()

    def test_is_online(self):
        assert StatusUpdateRequest(is_online=True).is_online is True


class TestUserResponse:

    def test_from_user_hides_password(self):
        user = User(
            id="6f1c1f7e-8d5b-4a55-9f2e-1d1b5f0c2a11",
            email="lecturer@example.com",
            name="Dr. Rao",
            hashed_password="secret-hash",
            role=UserRole.LECTURER,
            department="Physics",
            is_online=False,
            is_active=True,
            created_at=datetime(2024, 1, 1),
        )

        response = UserResponse.from_user(user)
        data = response.model_dump()

        assert data["role"] == "lecturer"
        assert data["student_id"] is None
        assert "hashed_password" not in data

    def test_login_response_defaults(self):
        user = UserResponse(id="1", email="a@example.com", name="A", role="student")
        response = LoginResponse(access_token="tok", user=user)

        assert response.message == "Login successful"
        assert response.token_type == "bearer"


class TestAnnouncementSchemas:

    def test_create_defaults(self):
        payload = AnnouncementCreate(title="t", content="c", category="general", target_audience=["student"])

        assert payload.is_pinned is False
        assert payload.expires_at is None
        assert payload.target_departments == []
        assert payload.attachments == []

    def test_update_tracks_only_sent_fields(self):
        payload = AnnouncementUpdate(is_pinned=True, expires_at=None)

        assert payload.model_dump(exclude_unset=True) == {"is_pinned": True, "expires_at": None}


class TestMisc:

    def test_message_type_defaults_to_text(self):
        assert MessageCreate(receiver_id="x", content="hi").type == "text"

    def test_mark_notifications_defaults(self):
        payload = MarkNotificationsRead()

        assert payload.notification_ids is None
        assert payload.mark_all_as_read is False

    def test_forum_post_tags_default(self):
        assert ForumPostCreate(title="t").tags == []
