from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from shortlink.db.Connection import database
from shortlink.schemas.LoginRequest import LoginRequest, LoginResponse
from shortlink.schemas.UserRecord import UserRecord
from shortlink.services import auth

router = APIRouter(tags=["auth"])


@router.get("/login", response_class=PlainTextResponse)
def login_page():
    return "Login page"


@router.post("/login", response_model=LoginResponse)
def login_endpoint(credentials: LoginRequest, request: Request, db: Session = Depends(database.get_db)):
    user = auth.login(request, db, credentials.username, credentials.password)
    return LoginResponse(username=user.username, is_admin=user.is_admin)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout_endpoint(request: Request):
    auth.logout(request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=LoginResponse)
def current_user(user: UserRecord = Depends(auth.require_user)):
    return LoginResponse(username=user.username, is_admin=user.is_admin)
