# auth.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import Settings, get_settings
from db import USERS_COLLECTION, get_db
from models import Message, Token, UserSignin, UserSignup
from utils.auth_utils import hash_password, sign_token, verify_password

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api")

INVALID_CREDENTIALS = "Invalid email or password"

# -----------------------------
# Routes
# -----------------------------

@auth_router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=Message)
def signup(
    user: UserSignup,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    users = db[USERS_COLLECTION]
    try:
        existing_user = users.find_one({"email": user.email})
        if existing_user is None:
            users.insert_one({
                "username": user.username,
                "email": user.email,
                "password": hash_password(user.password, settings),
            })
    except PyMongoError:
        logger.exception("Error signing up %s", user.email)
        raise HTTPException(status_code=500, detail="Internal server error")

    if existing_user is not None:
        raise HTTPException(status_code=400, detail="User already exists")
    return {"message": "User signed up successfully"}


@auth_router.post("/signin", response_model=Token)
def signin(
    user: UserSignin,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    logger.info("Sign-in attempt for %s", user.email)
    try:
        db_user = db[USERS_COLLECTION].find_one({"email": user.email})
    except PyMongoError:
        logger.exception("Error signing in %s", user.email)
        raise HTTPException(status_code=500, detail="Internal server error")

    # same message for an unknown email and a wrong password
    if not db_user or not verify_password(user.password, db_user.get("password") or "", settings):
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    token = sign_token({"email": db_user["email"], "id": str(db_user["_id"])}, settings)
    return {"token": token}
