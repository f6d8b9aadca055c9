# backend/chat_controller.py
"""Conversation controller for the chat client.

Drives the conversation list, the active thread and the send flow:
persist the user message, stream the assistant reply from the relay into
the view, then persist the final reply and reload from the store.
"""

import logging
from typing import Callable, List, Literal, Optional

from pydantic import BaseModel

import schemas
from auth_client import SIGNED_IN, SIGNED_OUT
from chat_state import ChatState, ThreadItem
from sse import iter_deltas

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


def log_notification(notification: Notification):
    logger.info("[%s] %s: %s", notification.variant, notification.title, notification.description)


class ChatController:
    def __init__(
        self,
        store,
        relay,
        auth,
        notify: Optional[Callable[[Notification], None]] = None,
        state: Optional[ChatState] = None,
    ):
        self.store = store
        self.relay = relay
        self.auth = auth
        self.notify = notify or log_notification
        self.state = state or ChatState()
        self._unsubscribe = auth.on_auth_state_change(self._on_auth_state_change)

    def close(self):
        self._unsubscribe()

    def _error(self, description: str):
        self.notify(Notification(title="Error", description=description, variant="destructive"))

    def _on_auth_state_change(self, event: str, access_token: Optional[str]):
        if event == SIGNED_OUT:
            self.state.reset()
        elif event == SIGNED_IN:
            self.list_conversations()

    def _current_user(self):
        try:
            return self.auth.get_user()
        except Exception as e:
            logger.error("Error loading user: %s", e)
            return None

    # ─── Reads: failures are logged, previous state is kept ───────────────────
    def list_conversations(self) -> List[schemas.ConversationOut]:
        if self._current_user() is None:
            return self.state.conversations
        try:
            conversations = self.store.list_conversations()
        except Exception as e:
            logger.error("Error loading conversations: %s", e)
            return self.state.conversations
        self.state.set_conversations(conversations)
        return conversations

    def list_messages(self, conversation_id: int) -> List[ThreadItem]:
        try:
            messages = self.store.list_messages(conversation_id)
        except Exception as e:
            logger.error("Error loading messages: %s", e)
            if conversation_id == self.state.current_conversation_id:
                return self.state.messages
            return []
        if conversation_id == self.state.current_conversation_id:
            self.state.set_messages(messages)
        return messages

    # ─── Writes: failures notify ───────────────────────────────────────────────
    def create_conversation(self) -> Optional[int]:
        if self._current_user() is None:
            self._error("Couldn't start a new chat: you are signed out")
            return None
        try:
            conversation = self.store.create_conversation()
        except Exception as e:
            logger.error("Error creating conversation: %s", e)
            self._error("Couldn't start a new chat")
            return None

        self.list_conversations()
        return conversation.id

    def delete_conversation(self, conversation_id: int):
        try:
            self.store.delete_conversation(conversation_id)
        except Exception as e:
            logger.error("Error deleting conversation: %s", e)
            self._error("Couldn't delete the chat")
            return

        if self.state.current_conversation_id == conversation_id:
            self.state.clear_thread()

        self.list_conversations()
        self.notify(Notification(title="Done", description="Chat deleted"))

    def select_conversation(self, conversation_id: int):
        self.state.set_current_conversation(conversation_id)
        self.list_messages(conversation_id)

    def new_chat(self) -> Optional[int]:
        conversation_id = self.create_conversation()
        if conversation_id is not None:
            self.select_conversation(conversation_id)
        return conversation_id

    def submit(self, text: str):
        """Composer action: starts a chat first when none is active."""
        text = (text or "").strip()
        if not text or self.state.is_loading:
            return
        conversation_id = self.state.current_conversation_id
        if conversation_id is None:
            conversation_id = self.new_chat()
            if conversation_id is None:
                return
        self.send_message(conversation_id, text)

    def send_message(self, conversation_id: int, text: str):
        if conversation_id is None or not text or not text.strip():
            return

        self.state.set_loading(True)
        try:
            self.store.insert_message(conversation_id, "user", text)
            try:
                self._stream_reply(conversation_id)
            finally:
                # The store copy replaces the pending reply and reorders the list
                self.list_messages(conversation_id)
                self.list_conversations()
        except Exception as e:
            logger.exception("Error sending message: %s", e)
            self._error(str(e) or "Couldn't send the message")
        finally:
            self.state.set_loading(False)

    def _stream_reply(self, conversation_id: int):
        history = self.store.list_messages(conversation_id)
        payload = [{"role": m.role, "content": m.content} for m in history]

        reply = ""
        for delta in iter_deltas(self.relay.stream(payload)):
            reply += delta
            if conversation_id == self.state.current_conversation_id:
                self.state.show_reply(reply)

        if reply:
            self.store.insert_message(conversation_id, "assistant", reply)
