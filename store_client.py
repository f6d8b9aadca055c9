# backend/store_client.py

from typing import List, Optional

import requests

import schemas
from auth_client import AuthClient, error_detail


class StoreError(Exception):
    pass


class StoreClient:
    """HTTP adapter for the conversation/message store."""

    def __init__(self, auth: AuthClient, base_url: Optional[str] = None, http=None):
        self.auth = auth
        self.base_url = (base_url or auth.base_url).rstrip("/")
        self.http = http or auth.http

    def _request(self, method: str, path: str, **kwargs):
        try:
            resp = self.http.request(
                method, f"{self.base_url}{path}", headers=self.auth.headers(), **kwargs
            )
        except requests.RequestException as e:
            raise StoreError(str(e)) from e
        if resp.status_code >= 400:
            raise StoreError(error_detail(resp, f"Store request failed ({resp.status_code})"))
        return resp

    # ─── Conversations ─────────────────────────────────────────────────────────
    def list_conversations(self) -> List[schemas.ConversationOut]:
        resp = self._request("GET", "/conversations/")
        return [schemas.ConversationOut.model_validate(c) for c in resp.json()]

    def create_conversation(self, title: Optional[str] = None) -> schemas.ConversationOut:
        resp = self._request("POST", "/conversations/", json={"title": title})
        return schemas.ConversationOut.model_validate(resp.json())

    def delete_conversation(self, conversation_id: int):
        self._request("DELETE", f"/conversations/{conversation_id}")

    # ─── Messages ──────────────────────────────────────────────────────────────
    def list_messages(self, conversation_id: int) -> List[schemas.MessageOut]:
        resp = self._request("GET", f"/conversations/{conversation_id}/messages")
        return [schemas.MessageOut.model_validate(m) for m in resp.json()]

    def insert_message(self, conversation_id: int, role: str, content: str) -> schemas.MessageOut:
        resp = self._request(
            "POST",
            f"/conversations/{conversation_id}/messages",
            json={"role": role, "content": content},
        )
        return schemas.MessageOut.model_validate(resp.json())
