from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from . import messages, users
from .auth import create_access_token, get_current_user
from .database import get_db
from .errors import Forbidden
from .schemas import (
	MessageCreate,
	MessageDetailResponse,
	MessageOutResponse,
	MessageReadResponse,
	ReceivedMessagesResponse,
	SentMessagesResponse,
	Token,
	UserCreate,
	UserListResponse,
	UserResponse,
)


auth_router = APIRouter(prefix="/auth", tags=["Auth"])
users_router = APIRouter(prefix="/users", tags=["Users"])
messages_router = APIRouter(prefix="/messages", tags=["Messages"])


def ensure_correct_user(username: str, current_user: str) -> None:
	if username != current_user:
		raise Forbidden("Unauthorized")


@auth_router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
	user = users.register(
		db,
		username=payload.username,
		password=payload.password,
		first_name=payload.first_name,
		last_name=payload.last_name,
		phone=payload.phone,
	)
	return {"user": user}


@auth_router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
	if not users.authenticate(db, form_data.username, form_data.password):
		raise HTTPException(status_code=400, detail="Incorrect username or password")
	users.update_login_timestamp(db, form_data.username)
	access_token = create_access_token({"sub": form_data.username})
	return {"access_token": access_token, "token_type": "bearer"}


@users_router.get("", response_model=UserListResponse)
def list_users(current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	return {"users": users.all_users(db)}


@users_router.get("/{username}", response_model=UserResponse)
def get_user(username: str, current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	ensure_correct_user(username, current_user)
	return {"user": users.get(db, username)}


@users_router.get("/{username}/from", response_model=SentMessagesResponse)
def get_messages_from(username: str, current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	ensure_correct_user(username, current_user)
	return {"messages": users.messages_from(db, username)}


@users_router.get("/{username}/to", response_model=ReceivedMessagesResponse)
def get_messages_to(username: str, current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	ensure_correct_user(username, current_user)
	return {"messages": users.messages_to(db, username)}


@messages_router.get("/{message_id}", response_model=MessageDetailResponse)
def get_message(message_id: int, current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	return {"message": messages.get_by_id(db, message_id, current_user)}


@messages_router.post("", response_model=MessageOutResponse, status_code=status.HTTP_201_CREATED)
def send_message(
	payload: MessageCreate,
	current_user: str = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	return {"message": messages.send(db, current_user, payload.to_username, payload.body)}


@messages_router.post("/{message_id}/read", response_model=MessageReadResponse)
def mark_message_read(message_id: int, current_user: str = Depends(get_current_user), db: Session = Depends(get_db)):
	return {"message": messages.mark_read(db, message_id, current_user)}
