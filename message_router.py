# backend/message_router.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

import models
import schemas
from db import get_db
from auth import get_current_user, require_api_key

router = APIRouter(
    prefix="/conversations",
    tags=["messages"],
    dependencies=[Depends(require_api_key)],
)


def get_owned_conversation(conv_id: int, db: Session, user: models.User) -> models.Conversation:
    conv = (
        db.query(models.Conversation)
          .filter(
            models.Conversation.id == conv_id,
            models.Conversation.user_id == user.id
          )
          .first()
    )
    if not conv:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conv


# ─── GET /conversations/{conv_id}/messages ────────────────────────────────────
@router.get("/{conv_id}/messages", response_model=List[schemas.MessageOut])
def list_messages(
    conv_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    # 1) Verify this conversation exists and belongs to the user
    get_owned_conversation(conv_id, db, current_user)

    # 2) Fetch all messages in that conversation, oldest first
    msgs = (
        db.query(models.Message)
          .filter(models.Message.conversation_id == conv_id)
          .order_by(models.Message.created_at.asc(), models.Message.id.asc())
          .all()
    )
    return msgs


# ─── POST /conversations/{conv_id}/messages ───────────────────────────────────
@router.post("/{conv_id}/messages", response_model=schemas.MessageOut, status_code=201)
def create_message(
    conv_id: int,
    body: schemas.MessageCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    conv = get_owned_conversation(conv_id, db, current_user)

    new_msg = models.Message(
        conversation_id=conv.id,
        role=body.role,
        content=body.content
    )
    db.add(new_msg)
    # Keeps the conversation list ordering and title in step with its messages
    conv.touch(new_msg)
    db.commit()
    db.refresh(new_msg)
    return new_msg
