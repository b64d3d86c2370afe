from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
	username: str = Field(min_length=1, max_length=64)
	password: str = Field(min_length=1, max_length=72)
	first_name: str = Field(min_length=1, max_length=128)
	last_name: str = Field(min_length=1, max_length=128)
	phone: str = Field(min_length=1, max_length=32)


class UserBasic(BaseModel):
	username: str
	first_name: str
	last_name: str
	phone: str

	class Config:
		from_attributes = True


class UserOut(UserBasic):
	join_at: datetime
	last_login_at: Optional[datetime] = None


class UserResponse(BaseModel):
	user: UserOut


class UserListResponse(BaseModel):
	users: List[UserBasic]


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


class MessageCreate(BaseModel):
	to_username: Optional[str] = None
	body: Optional[str] = None


class MessageOut(BaseModel):
	id: int
	from_username: str
	to_username: str
	body: str
	sent_at: datetime

	class Config:
		from_attributes = True


class MessageDetail(BaseModel):
	id: int
	body: str
	sent_at: datetime
	read_at: Optional[datetime] = None
	from_user: UserBasic
	to_user: UserBasic

	class Config:
		from_attributes = True


class MessageRead(BaseModel):
	id: int
	read_at: datetime

	class Config:
		from_attributes = True


class SentMessage(BaseModel):
	id: int
	to_user: UserBasic
	body: str
	sent_at: datetime
	read_at: Optional[datetime] = None

	class Config:
		from_attributes = True


class ReceivedMessage(BaseModel):
	id: int
	from_user: UserBasic
	body: str
	sent_at: datetime
	read_at: Optional[datetime] = None

	class Config:
		from_attributes = True


class MessageOutResponse(BaseModel):
	message: MessageOut


class MessageDetailResponse(BaseModel):
	message: MessageDetail


class MessageReadResponse(BaseModel):
	message: MessageRead


class SentMessagesResponse(BaseModel):
	messages: List[SentMessage]


class ReceivedMessagesResponse(BaseModel):
	messages: List[ReceivedMessage]
