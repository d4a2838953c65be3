"""
Accounts, sessions, profiles and the admin authorization gate.

An *account* holds credentials and active session tokens. A *profile* (the
"user" collection) is created the first time an account passes the admin
gate and carries the role flag that the gate checks.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Cookie, Depends, Header, HTTPException
from pymongo.database import Database
from pymongo.errors import PyMongoError

import config
from database import (
    ACCOUNT_COLLECTION,
    USER_COLLECTION,
    create_document,
    get_db,
    get_documents,
    serialize,
    utc_now_iso,
)
from schemas import Account, User

logger = logging.getLogger(__name__)

SIGN_IN_PATH = "/sign-in"
PUBLIC_ROOT_PATH = "/"
PROFILE_FIELDS = {"name": 1, "email": 1, "image_url": 1, "joined_at": 1, "account_id": 1, "status": 1}


class AuthRedirect(Exception):
    """Raised by route guards to send the caller somewhere else."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


# ----------------------
# Accounts and sessions
# ----------------------

def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((salt + password).encode()).hexdigest()


def extract_token(authorization: Optional[str], session: Optional[str] = None) -> str:
    token = (authorization or "").replace("Bearer ", "").strip()
    return token or (session or "").strip()


def get_account_by_email(db: Database, email: str) -> Optional[dict]:
    return db[ACCOUNT_COLLECTION].find_one({"email": email})


def get_account_by_token(db: Database, token: str) -> Optional[dict]:
    if not token:
        return None
    return db[ACCOUNT_COLLECTION].find_one({"tokens": token})


def register_account(db: Database, name: str, email: str, password: str, image_url: Optional[str] = None) -> Tuple[dict, str]:
    if get_account_by_email(db, email):
        raise HTTPException(status_code=400, detail="Email already registered")

    salt = secrets.token_hex(16)
    token = secrets.token_hex(24)
    now = datetime.now(timezone.utc)
    account = Account(
        name=name,
        email=email,
        password_hash=hash_password(password, salt),
        salt=salt,
        image_url=image_url,
        tokens=[token],
    ).model_dump()
    account.update({"created_at": now, "updated_at": now})
    account["_id"] = db[ACCOUNT_COLLECTION].insert_one(account).inserted_id
    return account, token


def login_account(db: Database, email: str, password: str) -> Tuple[dict, str]:
    account = get_account_by_email(db, email)
    if not account:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if hash_password(password, account.get("salt", "")) != account.get("password_hash"):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = secrets.token_hex(24)
    db[ACCOUNT_COLLECTION].update_one(
        {"_id": account["_id"]},
        {"$push": {"tokens": token}, "$set": {"updated_at": datetime.now(timezone.utc)}},
    )
    return account, token


def logout_account(db: Database, token: str) -> bool:
    account = get_account_by_token(db, token)
    if not account:
        return False
    db[ACCOUNT_COLLECTION].update_one({"_id": account["_id"]}, {"$pull": {"tokens": token}})
    return True


def current_account(
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
    db: Database = Depends(get_db),
) -> dict:
    account = get_account_by_token(db, extract_token(authorization, session))
    if not account:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return account


# ----------------------
# Profiles
# ----------------------

def get_existing_user(db: Database, account_id: str) -> Optional[dict]:
    try:
        profile = db[USER_COLLECTION].find_one({"account_id": account_id})
    except PyMongoError as e:
        logger.error(f"Error fetching user: {e}")
        return None
    return serialize(profile) if profile else None


def store_user_data(db: Database, account: dict) -> dict:
    """Create the profile for an account on its first admitted login."""
    email = account.get("email", "")
    profile = User(
        account_id=str(account["_id"]),
        name=account.get("name", ""),
        email=email,
        image_url=account.get("image_url"),
        joined_at=utc_now_iso(),
        status="admin" if email.lower() in config.ADMIN_EMAILS else "user",
    )
    profile_id = create_document(db, USER_COLLECTION, profile)
    logger.info(f"Created {profile.status} profile {profile_id} for account {profile.account_id}")
    return {"_id": profile_id, **profile.model_dump()}


def get_user(db: Database, account: Optional[dict]) -> dict:
    if not account:
        raise AuthRedirect(SIGN_IN_PATH)
    profile = db[USER_COLLECTION].find_one({"account_id": str(account["_id"])}, PROFILE_FIELDS)
    if not profile:
        raise AuthRedirect(SIGN_IN_PATH)
    return serialize(profile)


def get_all_users(db: Database, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
    try:
        total = db[USER_COLLECTION].count_documents({})
        if total == 0:
            return [], total
        users = get_documents(db, USER_COLLECTION, limit=limit, offset=offset, sort=("joined_at", -1))
        return users, total
    except PyMongoError as e:
        logger.error(f"Error fetching users: {e}")
        return [], 0


# ----------------------
# Authorization gate
# ----------------------

def authorize_admin(db: Database, token: str) -> dict:
    """Resolve a session token to an admin profile or raise AuthRedirect.

    No session goes to sign-in, a plain user goes back to the public site and
    an account without a profile gets one created before the role check.
    """
    try:
        account = get_account_by_token(db, token)
        if not account:
            raise AuthRedirect(SIGN_IN_PATH)

        profile = get_existing_user(db, str(account["_id"]))
        if profile is None:
            profile = store_user_data(db, account)
    except PyMongoError as e:
        logger.error(f"Error in admin gate: {e}")
        raise AuthRedirect(SIGN_IN_PATH)

    if profile.get("status") == "user":
        raise AuthRedirect(PUBLIC_ROOT_PATH)
    return profile


def require_admin(
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
    db: Database = Depends(get_db),
) -> dict:
    return authorize_admin(db, extract_token(authorization, session))
