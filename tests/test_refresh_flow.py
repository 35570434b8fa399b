# tests/test_refresh_flow.py
import asyncio
from datetime import timedelta

from sqlalchemy import select

from pharmacare.core.auth import hash_token
from pharmacare.db.models.user import UserModel
from pharmacare.schemas.shared import Identity, Role
from tests._helpers import bearer, register_doctor, register_user


async def test_refresh_rotates_tokens(client):
    data = await register_user(client)
    old_refresh = data["tokens"]["refreshToken"]

    response = await client.post("/users/refresh-token", json={"refreshToken": old_refresh})
    assert response.status_code == 200
    new_pair = response.json()["data"]
    assert new_pair["refreshToken"] != old_refresh

    # the new access token works
    me = await client.get("/users/me", headers=bearer(new_pair["accessToken"]))
    assert me.status_code == 200


async def test_refresh_token_is_single_use(client):
    data = await register_user(client)
    old_refresh = data["tokens"]["refreshToken"]

    first = await client.post("/users/refresh-token", json={"refreshToken": old_refresh})
    assert first.status_code == 200

    replay = await client.post("/users/refresh-token", json={"refreshToken": old_refresh})
    assert replay.status_code == 403
    assert replay.json()["errorCode"] == "STALE_REFRESH_TOKEN"


async def test_only_latest_hash_is_stored(client, db):
    data = await register_user(client)
    rotated = (await client.post("/users/refresh-token", json={"refreshToken": data["tokens"]["refreshToken"]})).json()[
        "data"
    ]
    user = (await db.execute(select(UserModel).where(UserModel.phone == "9876543210"))).scalar_one()
    assert user.refresh_token_hash == hash_token(rotated["refreshToken"])


async def test_login_invalidates_previous_refresh_token(client):
    data = await register_user(client)
    await client.post("/users/login", json={"phone": "9876543210", "password": "Passw0rd!"})
    response = await client.post("/users/refresh-token", json={"refreshToken": data["tokens"]["refreshToken"]})
    assert response.status_code == 403


async def test_concurrent_rotation_has_one_winner(client):
    data = await register_user(client)
    token = data["tokens"]["refreshToken"]
    results = await asyncio.gather(
        client.post("/users/refresh-token", json={"refreshToken": token}),
        client.post("/users/refresh-token", json={"refreshToken": token}),
    )
    codes = sorted(r.status_code for r in results)
    assert codes[0] == 200
    assert codes.count(200) == 1


async def test_logout_revokes_refresh_token(client):
    data = await register_user(client)
    logout = await client.post("/users/logout", headers=bearer(data["tokens"]["accessToken"]))
    assert logout.status_code == 200
    response = await client.post("/users/refresh-token", json={"refreshToken": data["tokens"]["refreshToken"]})
    assert response.status_code == 403


async def test_garbage_refresh_token_is_401(client):
    response = await client.post("/users/refresh-token", json={"refreshToken": "junk"})
    assert response.status_code == 401
    assert response.json()["errorCode"] == "INVALID_TOKEN"


async def test_user_refresh_token_not_accepted_for_doctor(client):
    user = await register_user(client)
    await register_doctor(client)
    # both accounts may share id 1; the hash on the doctor row still differs
    response = await client.post("/doctors/refresh-token", json={"refreshToken": user["tokens"]["refreshToken"]})
    assert response.status_code == 403


async def test_doctor_refresh_flow(client):
    session = await register_doctor(client)
    response = await client.post("/doctors/refresh-token", json={"refreshToken": session["tokens"]["refreshToken"]})
    assert response.status_code == 200
    replay = await client.post("/doctors/refresh-token", json={"refreshToken": session["tokens"]["refreshToken"]})
    assert replay.status_code == 403


async def test_expired_access_then_refresh(client, tokens):
    data = await register_user(client)
    expired = tokens.issue_access_token(
        Identity(user_id=data["user"]["id"], phone="9876543210", role=Role.user),
        expires_delta=timedelta(seconds=-1),
    )
    rejected = await client.get("/users/me", headers=bearer(expired))
    assert rejected.status_code == 401

    response = await client.post("/users/refresh-token", json={"refreshToken": data["tokens"]["refreshToken"]})
    assert response.status_code == 200
    pair = response.json()["data"]
    assert pair["refreshToken"] != data["tokens"]["refreshToken"]
    assert (await client.get("/users/me", headers=bearer(pair["accessToken"]))).status_code == 200
