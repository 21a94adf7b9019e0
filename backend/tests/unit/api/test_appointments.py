"""
API Tests for appointments and time slots
"""
from datetime import datetime, timedelta, timezone
import pytest
from httpx import AsyncClient

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


def booking(lecturer, **overrides) -> dict:
    data = {
        "lecturer_id": str(lecturer.id),
        "title": "Project guidance",
        "description": "Discuss the final year project scope",
        "start_time": iso(timedelta(days=2)),
        "end_time": iso(timedelta(days=2, minutes=30)),
        "location": "Room 204",
    }
    data.update(overrides)
    return data


async def book(client: AsyncClient, headers: dict, lecturer, **overrides) -> str:
    response = await client.post("/api/v1/appointments", json=booking(lecturer, **overrides), headers=headers)
    assert response.status_code == 201
    return response.json()["appointment_id"]


class TestBooking:

    @pytest.mark.asyncio
    async def test_book_pending(self, client: AsyncClient, student, student_headers, lecturer):
        await book(client, student_headers, lecturer)

        response = await client.get("/api/v1/appointments", headers=student_headers)

        data = response.json()
        assert len(data) == 1
        assert data[0]["status"] == "pending"
        assert data[0]["lecturer_name"] == lecturer.name
        assert data[0]["student_name"] == student.name

    @pytest.mark.asyncio
    async def test_end_before_start(self, client: AsyncClient, student_headers, lecturer):
        response = await client.post(
            "/api/v1/appointments",
            json=booking(lecturer, end_time=iso(timedelta(days=1))),
            headers=student_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_lecturer(self, client: AsyncClient, student_headers, other_student):
        response = await client.post(
            "/api/v1/appointments", json=booking(other_student), headers=student_headers
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_lecturer_cannot_book(self, client: AsyncClient, lecturer, lecturer_headers):
        response = await client.post(
            "/api/v1/appointments", json=booking(lecturer), headers=lecturer_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_listing_scoped_and_soonest_first(
        self, client: AsyncClient, student_headers, other_student_headers, lecturer, lecturer_headers
    ):
        later = await book(client, student_headers, lecturer,
                           start_time=iso(timedelta(days=5)), end_time=iso(timedelta(days=5, hours=1)))
        sooner = await book(client, other_student_headers, lecturer)

        mine = await client.get("/api/v1/appointments", headers=student_headers)
        theirs = await client.get("/api/v1/appointments", headers=lecturer_headers)

        assert [a["id"] for a in mine.json()] == [later]
        assert [a["id"] for a in theirs.json()] == [sooner, later]


class TestResponding:

    @pytest.mark.asyncio
    async def test_accept_then_complete(self, client: AsyncClient, student_headers, lecturer, lecturer_headers):
        appointment_id = await book(client, student_headers, lecturer)

        accepted = await client.post(
            f"/api/v1/appointments/{appointment_id}/respond",
            json={"action": "accept", "notes": "Bring your report"},
            headers=lecturer_headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"
        assert accepted.json()["notes"] == "Bring your report"

        completed = await client.post(
            f"/api/v1/appointments/{appointment_id}/respond",
            json={"action": "complete"},
            headers=lecturer_headers
        )
        assert completed.json()["status"] == "completed"

    @pytest.mark.asyncio
    async def test_cannot_reject_accepted(self, client: AsyncClient, student_headers, lecturer, lecturer_headers):
        appointment_id = await book(client, student_headers, lecturer)
        await client.post(
            f"/api/v1/appointments/{appointment_id}/respond", json={"action": "accept"}, headers=lecturer_headers
        )

        response = await client.post(
            f"/api/v1/appointments/{appointment_id}/respond", json={"action": "reject"}, headers=lecturer_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_other_lecturer_forbidden(
        self, client: AsyncClient, student_headers, lecturer, make_user, auth_headers_for
    ):
        from app.models.user import UserRole

        appointment_id = await book(client, student_headers, lecturer)
        other = await make_user(UserRole.LECTURER)

        response = await client.post(
            f"/api/v1/appointments/{appointment_id}/respond",
            json={"action": "accept"},
            headers=auth_headers_for(other)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_action(self, client: AsyncClient, student_headers, lecturer, lecturer_headers):
        appointment_id = await book(client, student_headers, lecturer)

        response = await client.post(
            f"/api/v1/appointments/{appointment_id}/respond", json={"action": "maybe"}, headers=lecturer_headers
        )

        assert response.status_code == 400


class TestCancelAndDelete:

    @pytest.mark.asyncio
    async def test_student_cancels(self, client: AsyncClient, student_headers, lecturer):
        appointment_id = await book(client, student_headers, lecturer)

        response = await client.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        again = await client.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=student_headers)
        assert again.status_code == 400

    @pytest.mark.asyncio
    async def test_other_student_cannot_cancel(
        self, client: AsyncClient, student_headers, other_student_headers, lecturer
    ):
        appointment_id = await book(client, student_headers, lecturer)

        response = await client.post(
            f"/api/v1/appointments/{appointment_id}/cancel", headers=other_student_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_cancel_removes(self, client: AsyncClient, student_headers, admin_headers, lecturer):
        appointment_id = await book(client, student_headers, lecturer)

        response = await client.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=admin_headers)
        assert response.status_code == 200

        listing = await client.get("/api/v1/appointments", headers=admin_headers)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_then_existing_then_again(
        self, client: AsyncClient, student_headers, lecturer
    ):
        missing = await client.delete(f"/api/v1/appointments/{MISSING_ID}", headers=student_headers)
        assert missing.status_code == 404

        appointment_id = await book(client, student_headers, lecturer)

        deleted = await client.delete(f"/api/v1/appointments/{appointment_id}", headers=student_headers)
        assert deleted.status_code == 200

        repeat = await client.delete(f"/api/v1/appointments/{appointment_id}", headers=student_headers)
        assert repeat.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, client: AsyncClient, student_headers):
        response = await client.delete("/api/v1/appointments/not-a-uuid", headers=student_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"


class TestTimeSlots:

    async def _create_slot(self, client: AsyncClient, headers: dict, days: int = 3) -> str:
        response = await client.post(
            "/api/v1/timeslots",
            json={"start_time": iso(timedelta(days=days)), "end_time": iso(timedelta(days=days, hours=1))},
            headers=headers
        )
        assert response.status_code == 201
        return response.json()["slot_id"]

    @pytest.mark.asyncio
    async def test_only_lecturers_create(self, client: AsyncClient, student_headers):
        response = await client.post(
            "/api/v1/timeslots",
            json={"start_time": iso(timedelta(days=1)), "end_time": iso(timedelta(days=1, hours=1))},
            headers=student_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_booking_a_slot_takes_it(
        self, client: AsyncClient, lecturer, lecturer_headers, student_headers
    ):
        slot_id = await self._create_slot(client, lecturer_headers)

        available = await client.get("/api/v1/timeslots", headers=student_headers)
        assert [s["id"] for s in available.json()] == [slot_id]
        assert available.json()[0]["lecturer_name"] == lecturer.name

        response = await client.post(
            "/api/v1/appointments",
            json={"title": "Office hours", "slot_id": slot_id},
            headers=student_headers
        )
        assert response.status_code == 201

        after = await client.get("/api/v1/timeslots", headers=student_headers)
        assert after.json() == []

        twice = await client.post(
            "/api/v1/appointments",
            json={"title": "Office hours", "slot_id": slot_id},
            headers=student_headers
        )
        assert twice.status_code == 400

    @pytest.mark.asyncio
    async def test_slot_booking_uses_slot_times(
        self, client: AsyncClient, lecturer_headers, student_headers
    ):
        slot_id = await self._create_slot(client, lecturer_headers, days=2)
        slot = (await client.get("/api/v1/timeslots", headers=student_headers)).json()[0]

        moved = await client.post(
            "/api/v1/appointments",
            json={
                "title": "Office hours",
                "slot_id": slot_id,
                "start_time": iso(timedelta(days=7)),
                "end_time": iso(timedelta(days=7, hours=3)),
            },
            headers=student_headers
        )
        assert moved.status_code == 400
        assert moved.json()["details"]["field"] == "slot_id"

        still_open = await client.get("/api/v1/timeslots", headers=student_headers)
        assert [s["id"] for s in still_open.json()] == [slot_id]

        response = await client.post(
            "/api/v1/appointments",
            json={"title": "Office hours", "slot_id": slot_id},
            headers=student_headers
        )
        assert response.status_code == 201

        appointments = (await client.get("/api/v1/appointments", headers=student_headers)).json()
        assert appointments[0]["start_time"] == slot["start_time"]
        assert appointments[0]["end_time"] == slot["end_time"]

    @pytest.mark.asyncio
    async def test_delete_slot(self, client: AsyncClient, lecturer_headers, student_headers):
        slot_id = await self._create_slot(client, lecturer_headers)

        response = await client.delete(f"/api/v1/timeslots/{slot_id}", headers=lecturer_headers)
        assert response.status_code == 200

        listing = await client.get("/api/v1/timeslots", headers=student_headers)
        assert listing.json() == []
