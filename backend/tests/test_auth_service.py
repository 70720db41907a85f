"""
Social API Backend — Auth Service & Access Gate Tests
=======================================================

What:  register / login / logout / authenticate, token format, and the
       authorization rules of the Access Gate.
"""

import pydantic
import pytest
from sqlalchemy import func, select

from social_api.exceptions import (
    AuthError,
    AuthenticationRequiredError,
    ForbiddenError,
    ValidationError,
)
from social_api.models.access_token import AccessToken
from social_api.models.profile import Profile
from social_api.schemas.auth import LoginRequest, RegisterRequest
from social_api.security import hash_password, hash_token, parse_token, verify_password
from social_api.services.access_gate import AccessGate, Action
from social_api.services.auth_service import auth_service


async def _register(db, name="alice", email="alice@example.com", password="secret1"):
    return await auth_service.register(
        db, RegisterRequest(name=name, email=email, password=password)
    )


class TestPasswordsAndTokens:
    """security module helpers."""

    def test_password_hash_roundtrip(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_verify_against_garbage_hash_is_false(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_parse_token_with_id(self):
        assert parse_token("12|abcdef") == (12, "abcdef")

    def test_parse_token_without_id(self):
        assert parse_token("abcdef") == (None, "abcdef")

    def test_parse_token_non_numeric_prefix(self):
        assert parse_token("x|abc") == (None, "x|abc")

    @pytest.mark.parametrize("raw", [
        "2147483648|abc",
        "99999999999999999999999|abc",
        "9" * 5000 + "|abc",
        "\u00b2|abc",
        "\u0663|abc",
    ])
    def test_parse_token_unusable_id_is_part_of_secret(self, raw):
        assert parse_token(raw) == (None, raw)

    def test_parse_token_largest_id(self):
        assert parse_token("2147483647|abc") == (2147483647, "abc")


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_creates_user_with_hashed_password(self, db_session):
        user = await _register(db_session)

        assert user.id is not None
        assert user.password_hash != "secret1"
        assert verify_password("secret1", user.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, db_session):
        await _register(db_session)

        with pytest.raises(ValidationError) as exc_info:
            await _register(db_session, name="alice2")

        assert "email" in exc_info.value.context["fields"]

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, db_session):
        await _register(db_session)

        with pytest.raises(ValidationError) as exc_info:
            await _register(db_session, email="other@example.com")

        assert "name" in exc_info.value.context["fields"]

    @pytest.mark.asyncio
    async def test_password_whitespace_is_kept(self, db_session):
        user = await _register(db_session, password="  spaced  ")

        assert verify_password("  spaced  ", user.password_hash)
        assert not verify_password("spaced", user.password_hash)

    def test_password_limit_counts_bytes(self):
        with pytest.raises(pydantic.ValidationError, match="72 bytes"):
            RegisterRequest(name="alice", email="alice@example.com", password="\u00e9" * 40)

    @pytest.mark.asyncio
    async def test_out_of_range_token_id_is_rejected(self, db_session):
        with pytest.raises(AuthenticationRequiredError):
            await auth_service.authenticate(db_session, "99999999999999999999999|abc")


class TestLoginLogout:

    @pytest.mark.asyncio
    async def test_login_issues_token(self, db_session):
        user = await _register(db_session)

        token, logged_in = await auth_service.login(
            db_session, LoginRequest(email="alice@example.com", password="secret1")
        )

        assert logged_in.id == user.id
        token_id, secret = parse_token(token)
        stored = await db_session.get(AccessToken, token_id)
        assert stored.token_hash == hash_token(secret)
        assert secret not in stored.token_hash

    @pytest.mark.asyncio
    async def test_wrong_password_is_auth_error(self, db_session):
        await _register(db_session)

        with pytest.raises(AuthError) as exc_info:
            await auth_service.login(
                db_session, LoginRequest(email="alice@example.com", password="nope123")
            )

        assert exc_info.value.message == "The provided credentials are incorrect."
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_unknown_email_is_auth_error(self, db_session):
        with pytest.raises(AuthError):
            await auth_service.login(
                db_session, LoginRequest(email="ghost@example.com", password="secret1")
            )

    @pytest.mark.asyncio
    async def test_authenticate_builds_actor(self, db_session):
        user = await _register(db_session)
        token, _ = await auth_service.login(
            db_session, LoginRequest(email="alice@example.com", password="secret1")
        )

        actor = await auth_service.authenticate(db_session, token)

        assert actor.user_id == user.id
        assert actor.email == "alice@example.com"
        assert actor.profile_id is None

    @pytest.mark.asyncio
    async def test_authenticate_links_profile_by_email(self, db_session):
        await _register(db_session)
        profile = Profile(
            username="alice", email="alice@example.com", password_hash=hash_password("x" * 8)
        )
        db_session.add(profile)
        await db_session.flush()
        token, _ = await auth_service.login(
            db_session, LoginRequest(email="alice@example.com", password="secret1")
        )

        actor = await auth_service.authenticate(db_session, token)

        assert actor.profile_id == profile.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [None, "", "999|nope", "garbage"])
    async def test_authenticate_rejects_bad_tokens(self, db_session, raw):
        with pytest.raises(AuthenticationRequiredError):
            await auth_service.authenticate(db_session, raw)

    @pytest.mark.asyncio
    async def test_authenticate_rejects_wrong_secret_for_valid_id(self, db_session):
        await _register(db_session)
        token, _ = await auth_service.login(
            db_session, LoginRequest(email="alice@example.com", password="secret1")
        )
        token_id, _ = parse_token(token)

        with pytest.raises(AuthenticationRequiredError):
            await auth_service.authenticate(db_session, f"{token_id}|forged")

    @pytest.mark.asyncio
    async def test_logout_revokes_every_token(self, db_session):
        await _register(db_session)
        credentials = LoginRequest(email="alice@example.com", password="secret1")
        first, _ = await auth_service.login(db_session, credentials)
        second, _ = await auth_service.login(db_session, credentials)
        actor = await auth_service.authenticate(db_session, first)

        removed = await auth_service.logout(db_session, actor)

        assert removed == 2
        count = await db_session.execute(select(func.count(AccessToken.id)))
        assert count.scalar_one() == 0
        with pytest.raises(AuthenticationRequiredError):
            await auth_service.authenticate(db_session, second)


class TestAccessGate:

    def test_anonymous_is_rejected(self):
        gate = AccessGate(enforce_ownership=False)
        with pytest.raises(AuthenticationRequiredError):
            gate.authorize(None, Action.CREATE, "post")

    def test_ownership_blind_by_default(self, make_actor):
        gate = AccessGate(enforce_ownership=False)
        actor = make_actor(profile_id=1)

        assert gate.authorize(actor, Action.DELETE, "post", owner_profile_id=99) is actor

    def test_enforced_owner_allowed(self, make_actor):
        gate = AccessGate(enforce_ownership=True)
        actor = make_actor(profile_id=7)

        assert gate.authorize(actor, Action.UPDATE, "comment", owner_profile_id=7) is actor

    def test_enforced_non_owner_forbidden(self, make_actor):
        gate = AccessGate(enforce_ownership=True)

        with pytest.raises(ForbiddenError, match="not allowed to delete this post"):
            gate.authorize(make_actor(profile_id=7), Action.DELETE, "post", owner_profile_id=8)

    def test_enforced_actor_without_profile_forbidden(self, make_actor):
        gate = AccessGate(enforce_ownership=True)

        with pytest.raises(ForbiddenError):
            gate.authorize(make_actor(profile_id=None), Action.UPDATE, "profile", owner_profile_id=1)

    def test_enforced_without_owner_only_needs_authentication(self, make_actor):
        gate = AccessGate(enforce_ownership=True)
        actor = make_actor(profile_id=None)

        assert gate.authorize(actor, Action.CREATE, "profile") is actor
