# evalhub/auth/api.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm

from evalhub.shared.db import get_db
from evalhub.shared.auth import create_access_token, get_user
from evalhub.shared.config import settings
from evalhub.auth.service import register_user, authenticate_user
from evalhub.profiles.service import get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str | None = Field(default=None, max_length=200)

@router.post("/register", status_code=201)
def api_register(inb: RegisterIn, db: Session = Depends(get_db)):
    try:
        user = register_user(db, inb.email, inb.password, full_name=inb.full_name)
    except ValueError as e:
        raise HTTPException(400, str(e))
    logger.info("registered user %s", user["id"])
    return {"ok": True, "user": user}

@router.post("/token")
def api_token(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    if settings.AUTH_DEMO:
        # return the demo token; user pastes it in Authorize
        return {"access_token": settings.DEMO_TOKEN, "token_type": "bearer", "demo": True}
    user = authenticate_user(db, form.username, form.password)
    if not user:
        logger.info("failed login for %s", form.username)
        raise HTTPException(401, "invalid credentials")
    # first login creates the profile if an older account never got one
    get_or_create_profile(db, user)
    token = create_access_token(sub=user["sub"], email=user["email"], role=user["role"])
    return {"access_token": token, "token_type": "bearer", "demo": False}

@router.get("/me")
def api_me(user = Depends(get_user)):
    return {"ok": True, "user": user}
