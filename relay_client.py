# backend/relay_client.py

from typing import Dict, Iterator, List, Optional

import requests

from config import get_settings

DEFAULT_ERROR = "Failed to get AI response"


class RelayError(Exception):
    pass


class RelayClient:
    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None, http=None):
        settings = get_settings()
        self.url = url or settings.relay_url
        self.api_key = settings.store_public_key if api_key is None else api_key
        self.http = http or requests.Session()

    def stream(self, messages: List[Dict[str, str]]) -> Iterator[bytes]:
        """POST the history and return an iterator over the raw event-stream bytes.

        Raises RelayError straight away when the relay answers with an error.
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            resp = self.http.post(self.url, headers=headers, json={"messages": messages}, stream=True)
        except requests.RequestException as e:
            raise RelayError(str(e)) from e

        if not resp.ok:
            message = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = body.get("error")
            except ValueError:
                pass
            resp.close()
            raise RelayError(message or DEFAULT_ERROR)

        return self._iter_body(resp)

    @staticmethod
    def _iter_body(resp) -> Iterator[bytes]:
        try:
            for chunk in resp.iter_content(chunk_size=None):
                if chunk:
                    yield chunk
        finally:
            resp.close()
