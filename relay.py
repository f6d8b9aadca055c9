# backend/relay.py
"""Streaming chat relay.

Runs as its own ASGI app (``python relay.py``, port ``RELAY_PORT``), the way a serverless
function sits beside the store. It forwards chat history to the AI gateway
with the PejuangBot persona prepended and passes the event stream back
untouched.
"""

import logging
from typing import Dict, Iterator, List

import requests
from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response, StreamingResponse

import schemas
from config import Settings, configure_logging, get_settings

configure_logging()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

RATE_LIMITED_MESSAGE = "Rate limit exceeded, please try again later 🙏"
PAYMENT_REQUIRED_MESSAGE = "Payment required, please top up the AI workspace credits"
GATEWAY_ERROR_MESSAGE = "AI gateway error"

SYSTEM_PROMPT = """You are PejuangBot, a friendly, supportive and sharp AI chat companion with a relaxed Gen Z vibe that still stays helpful.

PERSONALITY:
- Casual and polite, but smart and on topic
- An emoji now and then to keep things lively (don't overdo it)
- Chill Gen Z phrasing ("bet", "let's go", "no worries") where it fits
- Warm and encouraging
- Explain things in sentences that are easy to follow

MAIN JOBS:
- Answer questions on any topic (school, tech, entertainment, motivation, and more)
- Help with studying: explain material, give practice problems, help with writing
- Be up for casual chats, light advice or a positive push
- Keep track of the conversation context during the session

Always stay positive and helpful, and make the user feel comfortable!"""


class ConfigurationError(Exception):
    """Raised when the relay is missing required upstream configuration."""


app = FastAPI(title="PejuangBot Relay", version="1.0.0")


def json_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def build_gateway_payload(turns: List[schemas.ChatTurn], model: str) -> Dict:
    """OpenAI-compatible chat completion request with the persona in front."""
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend({"role": t.role, "content": t.content} for t in turns)
    return {
        "model": model,
        "messages": messages,
        "stream": True,
    }


def open_gateway_stream(payload: Dict, settings: Settings) -> requests.Response:
    if not settings.ai_gateway_api_key:
        raise ConfigurationError("AI_GATEWAY_API_KEY is not configured")

    return requests.post(
        settings.ai_gateway_url,
        headers={
            "Authorization": f"Bearer {settings.ai_gateway_api_key}",
            "Content-Type": "application/json",
        },
        json=payload,
        stream=True,
    )


def passthrough(upstream: requests.Response) -> Iterator[bytes]:
    try:
        for chunk in upstream.iter_content(chunk_size=None):
            if chunk:
                yield chunk
    finally:
        upstream.close()


@app.options("/functions/v1/chat")
def preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/functions/v1/chat")
async def chat(request: Request, settings: Settings = Depends(get_settings)):
    try:
        body = await request.body()
        chat_request = schemas.ChatRequest.model_validate_json(body)
        payload = build_gateway_payload(chat_request.messages, settings.ai_gateway_model)

        upstream = await run_in_threadpool(open_gateway_stream, payload, settings)

        if not upstream.ok:
            status_code = upstream.status_code
            if status_code == 429:
                upstream.close()
                return json_error(RATE_LIMITED_MESSAGE, 429)
            if status_code == 402:
                upstream.close()
                return json_error(PAYMENT_REQUIRED_MESSAGE, 402)
            error_text = await run_in_threadpool(lambda: upstream.text)
            upstream.close()
            logger.error("AI gateway error: %s %s", status_code, error_text)
            return json_error(GATEWAY_ERROR_MESSAGE, 500)

        return StreamingResponse(
            passthrough(upstream),
            status_code=200,
            headers={**CORS_HEADERS, "Content-Type": "text/event-stream"},
        )
    except Exception as e:
        logger.exception("Chat error: %s", e)
        return json_error(str(e) or "Unknown error", 500)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().relay_port)
