"""
System smoke test: full API flow in-process with SQLite.
Verifies health, access-code sign-in, role gates, avatar moderation, awards,
news reactions and the login rate limit against the seeded sample unit.
"""

from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from unitportal.api.middleware.rate_limit import get_store
from unitportal.database import get_db
from unitportal.kernel.models import Base
from unitportal.main import app
from unitportal.seed import seed_sample_data


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async client on a freshly seeded in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with session_maker() as session:
        await seed_sample_data(session)
        await session.commit()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    get_store().reset()
    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)
        get_store().reset()
        await engine.dispose()


async def sign_in(client: AsyncClient, access_code: str) -> Dict[str, str]:
    r = await client.post("/api/v1/auth/login", json={"access_code": access_code})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """Health endpoint responds."""
    r = await client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["personnel"] == 3
    assert "version" in data


@pytest.mark.asyncio
async def test_login_and_me(client: AsyncClient):
    """Access code sign-in returns a token and the member record."""
    r = await client.post("/api/v1/auth/login", json={"access_code": "admin001"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["member"]["nickname"] == "Командир"
    assert data["member"]["role"] == "admin"
    assert data["member"]["access_code"] == "ADMIN001"

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    r = await client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["rank_label"] == "Генерал"


@pytest.mark.asyncio
async def test_unknown_access_code(client: AsyncClient):
    r = await client.post("/api/v1/auth/login", json={"access_code": "WRONG999"})
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "invalid_access_code"


@pytest.mark.asyncio
async def test_guest_capabilities(client: AsyncClient):
    r = await client.get("/api/v1/auth/capabilities")
    assert r.status_code == 200
    data = r.json()
    assert data["role"] == "guest"
    assert data["can_act"] is False


@pytest.mark.asyncio
async def test_role_gates_on_directory(client: AsyncClient):
    """Guests get 401, plain members 403, moderators see the roster."""
    r = await client.get("/api/v1/personnel")
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "not_authenticated"

    user = await sign_in(client, "USER001")
    r = await client.get("/api/v1/personnel", headers=user)
    assert r.status_code == 403

    moderator = await sign_in(client, "MOD001")
    r = await client.get("/api/v1/personnel", params={"search": "иванов"}, headers=moderator)
    assert r.status_code == 200
    rows = r.json()
    assert [row["nickname"] for row in rows] == ["Рядовой Иванов"]
    # access codes are for admins only
    assert rows[0]["access_code"] is None


@pytest.mark.asyncio
async def test_admin_registers_member(client: AsyncClient):
    admin = await sign_in(client, "ADMIN001")
    r = await client.post(
        "/api/v1/personnel",
        json={"nickname": "Боец Смирнов", "rank": 0, "position": "Стрелок"},
        headers=admin,
    )
    assert r.status_code == 201, r.text
    code = r.json()["access_code"]
    assert code

    r = await client.post("/api/v1/auth/login", json={"access_code": code})
    assert r.status_code == 200
    assert r.json()["member"]["nickname"] == "Боец Смирнов"

    r = await client.post(
        "/api/v1/personnel",
        json={"nickname": "боец смирнов", "rank": 0},
        headers=admin,
    )
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "duplicate_identity"


@pytest.mark.asyncio
async def test_avatar_moderation_flow(client: AsyncClient):
    user = await sign_in(client, "USER001")
    me = (await client.get("/api/v1/auth/me", headers=user)).json()

    r = await client.post(
        f"/api/v1/personnel/{me['id']}/avatar",
        json={"image": "https://img.example/ivanov.png"},
        headers=user,
    )
    assert r.status_code == 202, r.text

    moderator = await sign_in(client, "MOD001")
    r = await client.get("/api/v1/avatars/pending", headers=moderator)
    assert r.status_code == 200
    assert [q["personnel_id"] for q in r.json()] == [me["id"]]

    r = await client.post(f"/api/v1/avatars/{me['id']}/approve", headers=moderator)
    assert r.status_code == 200

    r = await client.post(f"/api/v1/avatars/{me['id']}/approve", headers=moderator)
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "no_pending_request"

    me = (await client.get("/api/v1/auth/me", headers=user)).json()
    assert me["avatar"] == "https://img.example/ivanov.png"


@pytest.mark.asyncio
async def test_awards_flow(client: AsyncClient):
    moderator = await sign_in(client, "MOD001")
    user = await sign_in(client, "USER001")
    me = (await client.get("/api/v1/auth/me", headers=user)).json()

    r = await client.get("/api/v1/awards")
    assert r.status_code == 200
    awards = r.json()
    assert len(awards) == 3
    service_award = awards[1]

    r = await client.post(
        f"/api/v1/awards/{service_award['id']}/recipients",
        json={"recipient_id": me["id"]},
        headers=moderator,
    )
    assert r.status_code == 200, r.text

    r = await client.post(
        f"/api/v1/awards/{service_award['id']}/recipients",
        json={"recipient_id": me["id"]},
        headers=moderator,
    )
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "already_awarded"

    me = (await client.get("/api/v1/auth/me", headers=user)).json()
    assert service_award["name"] in me["awards"]


@pytest.mark.asyncio
async def test_news_reactions(client: AsyncClient):
    r = await client.get("/api/v1/news")
    assert r.status_code == 200
    feed = r.json()
    assert len(feed) == 2
    post = feed[0]
    assert "**субботу в 20:00**" in post["body"]

    assert post["reacted"] is False

    r = await client.post(f"/api/v1/news/{post['id']}/reactions")
    assert r.status_code == 401

    # the seeded member already reacts to the newest post
    user = await sign_in(client, "USER001")
    post = (await client.get(f"/api/v1/news/{post['id']}", headers=user)).json()
    assert post["reacted"] is True
    before = post["reaction_count"]

    r = await client.post(f"/api/v1/news/{post['id']}/reactions", headers=user)
    assert r.status_code == 200
    assert r.json()["reacted"] is False
    assert r.json()["reaction_count"] == before - 1

    r = await client.post(f"/api/v1/news/{post['id']}/reactions", headers=user)
    assert r.json()["reacted"] is True
    assert r.json()["reaction_count"] == before


@pytest.mark.asyncio
async def test_sections_are_public(client: AsyncClient):
    r = await client.get("/api/v1/sections/charter")
    assert r.status_code == 200
    assert len(r.json()) > 0

    r = await client.get("/api/v1/sections/armory")
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_login_rate_limit(client: AsyncClient):
    """Repeated guessing from one address is throttled."""
    statuses = [
        (await client.post("/api/v1/auth/login", json={"access_code": f"GUESS{i:03d}"})).status_code
        for i in range(15)
    ]
    assert 429 in statuses
    assert statuses[0] == 401


@pytest.mark.asyncio
async def test_openapi_documents_error_body(client: AsyncClient):
    r = await client.get("/openapi.json")
    assert r.status_code == 200
    schema = r.json()
    assert "ErrorResponse" in schema["components"]["schemas"]

    grant = schema["paths"]["/api/v1/awards/{award_id}/recipients"]["post"]["responses"]
    assert grant["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert "401" in grant
