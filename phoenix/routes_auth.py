"""
phoenix/routes_auth.py

Registration, login and current-user endpoints.

Handlers are plain `def` functions: FastAPI runs them on its threadpool, so
bcrypt hashing and blocking pymongo calls never hold up the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pymongo.errors import DuplicateKeyError, PyMongoError

from phoenix.auth_context import AuthContext, require_auth_context
from phoenix.db import AppContext, get_context, next_timestamp, parse_object_id
from phoenix.errors import Conflict, InternalError, InvalidCredentials, NotFound
from phoenix.logging_config import get_logger
from phoenix.models import User
from phoenix.schemas_auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from phoenix.security import create_access_token, hash_password, verify_password

_logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


@router.post("/register", response_model=TokenResponse)
def register(req: RegisterRequest, ctx: AppContext = Depends(get_context)) -> TokenResponse:
    """
    Create a user and return a token for it.

    Raises:
        Conflict(400): email already registered
        InternalError(500): store failure
    """
    try:
        if ctx.users.find_one({"email": req.email}, {"_id": 1}) is not None:
            _logger.info("auth.register_conflict")
            raise Conflict("User already exists")

        user = User(
            name=req.name,
            email=req.email,
            password=hash_password(req.password, rounds=ctx.settings.bcrypt_rounds),
            createdAt=next_timestamp(None),
        )
        result = ctx.users.insert_one(user.model_dump(exclude={"id"}))
    except DuplicateKeyError:
        # Lost a race with a concurrent registration for the same email
        _logger.info("auth.register_conflict", race=True)
        raise Conflict("User already exists")
    except PyMongoError:
        _logger.exception("auth.db_error", op="register")
        raise InternalError()

    user_id = str(result.inserted_id)
    _logger.info("auth.registered", user_id=user_id)
    return TokenResponse(token=create_access_token(user_id, ctx.settings))


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, ctx: AppContext = Depends(get_context)) -> TokenResponse:
    """
    Exchange email/password for a token.

    Unknown email and wrong password fail identically.

    Raises:
        InvalidCredentials(400)
        InternalError(500): store failure
    """
    try:
        row = ctx.users.find_one({"email": req.email}, {"password": 1})
    except PyMongoError:
        _logger.exception("auth.db_error", op="login")
        raise InternalError()

    if row is None or not verify_password(req.password, row.get("password") or ""):
        _logger.info("auth.login_failed")
        raise InvalidCredentials()

    user_id = str(row["_id"])
    _logger.info("auth.login", user_id=user_id)
    return TokenResponse(token=create_access_token(user_id, ctx.settings))


@router.get("/", response_model=UserResponse)
def current_user(
    auth: AuthContext = Depends(require_auth_context),
    ctx: AppContext = Depends(get_context),
) -> UserResponse:
    """
    Return the caller's user record without the password hash.

    Raises:
        NotFound(404): the token's user no longer exists
        InternalError(500): store failure
    """
    user_oid = parse_object_id(auth.user_id)
    if user_oid is None:
        raise NotFound("User not found")

    try:
        row = ctx.users.find_one({"_id": user_oid}, {"password": 0})
    except PyMongoError:
        _logger.exception("auth.db_error", op="current_user")
        raise InternalError()

    if row is None:
        raise NotFound("User not found")

    row["_id"] = str(row["_id"])
    return UserResponse.model_validate(row)
