"""Integration tests: GET /api/admin/stats."""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.database import get_session_factory
from app.main import app
from app.models.enums import UserRole
from app.core.security import create_access_token


class _BrokenSession:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def scalar(self, stmt):
        raise OperationalError("SELECT count(courses.id) FROM courses", {}, Exception("password authentication failed"))

    async def execute(self, stmt):
        raise OperationalError("SELECT users.role FROM users", {}, Exception("password authentication failed"))


@pytest.mark.asyncio
async def test_stats_requires_authentication(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/admin/stats")
    assert resp.status_code == 401
    body = resp.json()
    assert body["error"] == "Unauthorized"
    assert body["code"] == "AUTH_001"


@pytest.mark.asyncio
async def test_stats_rejects_invalid_token(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(
        f"{api_base}/admin/stats",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"] == "Unauthorized"


@pytest.mark.asyncio
async def test_stats_rejects_token_for_unknown_user(async_client: AsyncClient, api_base: str):
    token = create_access_token({"sub": "6f1c2d7e-0000-4000-8000-000000000000"})
    resp = await async_client.get(
        f"{api_base}/admin/stats",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_stats_rejects_suspended_admin(
    async_client: AsyncClient, api_base: str, make_user, headers_for
):
    admin = await make_user(role=UserRole.ADMIN, is_active=False)
    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(admin))
    assert resp.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.STUDENT, UserRole.INSTRUCTOR])
async def test_stats_forbidden_without_admin_access(
    async_client: AsyncClient, api_base: str, make_user, headers_for, role
):
    user = await make_user(role=role)
    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(user))
    assert resp.status_code == 403
    body = resp.json()
    assert body["error"] == "Forbidden"
    assert body["code"] == "AUTH_002"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.SUPER_ADMIN])
async def test_stats_allowed_for_admins(
    async_client: AsyncClient, api_base: str, make_user, headers_for, role
):
    user = await make_user(role=role)
    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(user))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_stats_response_shape(
    async_client: AsyncClient,
    api_base: str,
    make_user,
    make_course,
    make_enrollment,
    make_audit_log,
    headers_for,
):
    admin = await make_user(role=UserRole.ADMIN, created_days_ago=1, last_login_hours_ago=1)
    admin_two = await make_user(role=UserRole.ADMIN)
    for index in range(10):
        await make_user(role=UserRole.STUDENT, is_active=index < 7)
    course = await make_course()
    await make_enrollment(admin_two, course)
    await make_audit_log(action="UPDATE_USER", user=admin)

    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(admin))

    assert resp.status_code == 200
    data = resp.json()
    assert data["users"] == {
        "total": 12,
        "byRole": {"SUPER_ADMIN": 0, "ADMIN": 2, "INSTRUCTOR": 0, "STUDENT": 10},
        "active": 9,
        "suspended": 3,
        "recentSignups": 1,
        "recentLogins": 1,
    }
    assert data["courses"] == {"total": 1, "enabled": 1}
    assert data["enrollments"] == {"total": 1, "active": 1}

    assert len(data["recentActivity"]) == 1
    entry = data["recentActivity"][0]
    assert set(entry) == {"id", "action", "entity", "createdAt", "userId"}
    assert entry["action"] == "UPDATE_USER"
    assert entry["userId"] == str(admin.id)


@pytest.mark.asyncio
async def test_stats_recent_activity_capped_and_ordered(
    async_client: AsyncClient, api_base: str, make_user, make_audit_log, headers_for
):
    admin = await make_user(role=UserRole.SUPER_ADMIN)
    for minutes_ago in range(8):
        await make_audit_log(action=f"A{minutes_ago}", user=admin, minutes_ago=minutes_ago)

    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(admin))

    activity = resp.json()["recentActivity"]
    assert [entry["action"] for entry in activity] == ["A0", "A1", "A2", "A3", "A4"]
    created = [entry["createdAt"] for entry in activity]
    assert created == sorted(created, reverse=True)


@pytest.mark.asyncio
async def test_stats_store_failure_returns_generic_500(
    async_client: AsyncClient, api_base: str, make_user, headers_for
):
    admin = await make_user(role=UserRole.ADMIN)
    app.dependency_overrides[get_session_factory] = lambda: _BrokenSession

    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers_for(admin))

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "An error occurred while fetching statistics"
    assert body["code"] == "DB_001"
    assert body["errorId"].startswith("ERR_")
    raw = resp.text
    assert "password authentication failed" not in raw
    assert "SELECT" not in raw
    assert "Traceback" not in raw


@pytest.mark.asyncio
async def test_stats_echoes_request_id(
    async_client: AsyncClient, api_base: str, make_user, headers_for
):
    admin = await make_user(role=UserRole.ADMIN)
    headers = {**headers_for(admin), "X-Request-ID": "req-123"}

    resp = await async_client.get(f"{api_base}/admin/stats", headers=headers)

    assert resp.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in resp.headers
