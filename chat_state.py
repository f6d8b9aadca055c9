# backend/chat_state.py

from datetime import datetime
from typing import Callable, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from schemas import ConversationOut, MessageOut


class PendingReply(BaseModel):
    """Assistant text still streaming in. Never persisted, so it has no id."""
    role: Literal["assistant"] = "assistant"
    content: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


ThreadItem = Union[MessageOut, PendingReply]


def with_reply(items: List[ThreadItem], content: str) -> List[ThreadItem]:
    """Show ``content`` as the in-flight reply, replacing a previous one."""
    if items and isinstance(items[-1], PendingReply):
        return items[:-1] + [items[-1].model_copy(update={"content": content})]
    return items + [PendingReply(content=content)]


class ChatState:
    """View state owned by ChatController.

    Readers get copies; only the controller calls the setters.
    """

    def __init__(self):
        self._conversations: List[ConversationOut] = []
        self._current_conversation_id: Optional[int] = None
        self._messages: List[ThreadItem] = []
        self._is_loading = False
        self._listeners: List[Callable[["ChatState"], None]] = []

    @property
    def conversations(self) -> List[ConversationOut]:
        return list(self._conversations)

    @property
    def current_conversation_id(self) -> Optional[int]:
        return self._current_conversation_id

    @property
    def messages(self) -> List[ThreadItem]:
        return list(self._messages)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def current_conversation(self) -> Optional[ConversationOut]:
        for conv in self._conversations:
            if conv.id == self._current_conversation_id:
                return conv
        return None

    def subscribe(self, listener: Callable[["ChatState"], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        for listener in list(self._listeners):
            listener(self)

    # ─── Mutators ──────────────────────────────────────────────────────────────
    def set_conversations(self, conversations: List[ConversationOut]):
        self._conversations = list(conversations)
        self._changed()

    def set_current_conversation(self, conversation_id: Optional[int]):
        self._current_conversation_id = conversation_id
        self._changed()

    def set_messages(self, messages: List[ThreadItem]):
        self._messages = list(messages)
        self._changed()

    def show_reply(self, content: str):
        self._messages = with_reply(self._messages, content)
        self._changed()

    def set_loading(self, is_loading: bool):
        self._is_loading = is_loading
        self._changed()

    def clear_thread(self):
        self._current_conversation_id = None
        self._messages = []
        self._changed()

    def reset(self):
        self._conversations = []
        self._current_conversation_id = None
        self._messages = []
        self._is_loading = False
        self._changed()
