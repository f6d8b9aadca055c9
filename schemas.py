# backend/schemas.py

from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import List, Literal, Optional

Role = Literal["user", "assistant"]

# ---------- User-related schemas ----------

class UserCreate(BaseModel):
    email: EmailStr
    password: str

class UserOut(BaseModel):
    id: int
    email: EmailStr
    created_at: datetime

    class Config:
        from_attributes = True  # was orm_mode in v1, renamed in v2


class Token(BaseModel):
    access_token: str
    token_type: str  # e.g. "bearer"


# ---------- Conversation-related schemas ----------

class ConversationCreate(BaseModel):
    title: Optional[str] = None

class ConversationOut(BaseModel):
    id: int
    title: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Chat message schemas ----------

class MessageCreate(BaseModel):
    role: Role
    content: str

class MessageOut(BaseModel):
    id: int
    conversation_id: int
    role: Role
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


# ---------- Relay schemas ----------

class ChatTurn(BaseModel):
    role: Role
    content: str

class ChatRequest(BaseModel):
    messages: List[ChatTurn]
