from datetime import datetime

from chat_state import ChatState, PendingReply, with_reply
from schemas import MessageOut


def persisted(id, role, content):
    return MessageOut(id=id, conversation_id=1, role=role, content=content, created_at=datetime.utcnow())


def test_first_delta_appends_pending_reply():
    items = [persisted(1, "user", "Hi")]
    result = with_reply(items, "He")
    assert len(result) == 2
    assert isinstance(result[-1], PendingReply)
    assert result[-1].content == "He"
    assert result[-1].role == "assistant"


def test_later_deltas_replace_the_pending_reply():
    items = with_reply([persisted(1, "user", "Hi")], "He")
    result = with_reply(items, "Hello")
    assert len(result) == 2
    assert result[-1].content == "Hello"
    assert result[-1].created_at == items[-1].created_at


def test_persisted_assistant_message_is_not_replaced():
    items = [persisted(1, "user", "Hi"), persisted(2, "assistant", "Earlier answer")]
    result = with_reply(items, "New")
    assert [getattr(m, "id", None) for m in result] == [1, 2, None]
    assert result[1].content == "Earlier answer"


def test_accessors_return_copies():
    state = ChatState()
    state.set_messages([persisted(1, "user", "Hi")])
    state.messages.clear()
    assert len(state.messages) == 1


def test_listeners_see_every_change_until_unsubscribed():
    state = ChatState()
    seen = []
    unsubscribe = state.subscribe(lambda s: seen.append(s.is_loading))
    state.set_loading(True)
    state.set_loading(False)
    unsubscribe()
    state.set_loading(True)
    assert seen == [True, False]


def test_clear_thread_and_reset():
    state = ChatState()
    state.set_current_conversation(3)
    state.show_reply("partial")
    state.set_loading(True)

    state.clear_thread()
    assert state.current_conversation_id is None
    assert state.messages == []
    assert state.is_loading

    state.reset()
    assert not state.is_loading
    assert state.conversations == []
