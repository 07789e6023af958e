import pytest
from fastapi.security import HTTPAuthorizationCredentials
from app.core.ctx import AUTH_USER_ID_CTX, AUTH_ROLE_CTX
from app.core.dependencies.auth import get_current_user_with_roles, get_token_payload
from app.core.security import create_access_token
from app.domain.auth.schemas import TokenPayload
from app.domain.users.models import UserRole
from app.domain.exceptions import Unauthorized, Forbidden
from tests.helper import db_with_scalars_first, create_user


def _payload(role="user", user_id=1):
    return TokenPayload(user_id=user_id, username="alice", role=role, exp=4102444800)


@pytest.mark.asyncio
async def test_get_token_payload_ok():
    token = create_access_token(7, "alice", "user")

    payload = await get_token_payload(HTTPAuthorizationCredentials(scheme="Bearer", credentials=token))

    assert payload.user_id == 7
    assert payload.sub == "7"


@pytest.mark.asyncio
async def test_get_token_payload_missing_raises_401():
    with pytest.raises(Unauthorized) as e:
        await get_token_payload(None)

    assert str(e.value) == "Unauthorized. Please login."
    assert e.value.ctx["reason"] == "missing_token"


@pytest.mark.asyncio
async def test_get_token_payload_invalid_jwt_raises_401():
    with pytest.raises(Unauthorized) as e:
        await get_token_payload(HTTPAuthorizationCredentials(scheme="Bearer", credentials="bad-token"))

    assert e.value.ctx["reason"] == "invalid_token"


@pytest.mark.asyncio
async def test_get_current_user_with_roles_user_found_sets_context(mocker):
    dependency = get_current_user_with_roles("user", "admin")
    fake_user = create_user(mocker, id=4)
    db, res = db_with_scalars_first(mocker, fake_user)

    user = await dependency(_payload(user_id=4), db)

    assert user is fake_user
    assert AUTH_USER_ID_CTX.get() == 4
    assert AUTH_ROLE_CTX.get() == "user"
    db.execute.assert_awaited_once()
    res.scalars.return_value.first.assert_called_once()


@pytest.mark.asyncio
async def test_get_current_user_with_roles_token_role_rejected_before_lookup(mocker):
    dependency = get_current_user_with_roles("admin")
    db, _ = db_with_scalars_first(mocker, create_user(mocker))

    with pytest.raises(Forbidden) as e:
        await dependency(_payload(role="user"), db)

    assert str(e.value) == "Forbidden. Admin access required."
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_current_user_with_roles_stored_role_wins_over_token(mocker):
    dependency = get_current_user_with_roles("admin")
    demoted = create_user(mocker, role=UserRole.USER)
    db, _ = db_with_scalars_first(mocker, demoted)

    with pytest.raises(Forbidden):
        await dependency(_payload(role="admin"), db)


@pytest.mark.asyncio
async def test_get_current_user_with_roles_user_not_found_raises_401(mocker):
    dependency = get_current_user_with_roles("user")
    db, _ = db_with_scalars_first(mocker, None)

    with pytest.raises(Unauthorized) as e:
        await dependency(_payload(user_id=9), db)

    assert str(e.value) == "User not found"
    assert e.value.ctx == {"user_id": 9}
