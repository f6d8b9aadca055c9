# backend/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import configure_logging, get_settings
from db import engine, Base

# IMPORT MODELS so that create_all() sees them
import models  # noqa: F401

configure_logging()
logger = logging.getLogger(__name__)

# Create tables (users, conversations, messages)
Base.metadata.create_all(bind=engine)

settings = get_settings()

app = FastAPI(title="PejuangBot Store", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def root():
    return {"message": "Backend is running"}


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

# ——————————————————————————————————————————————
# Include authentication, conversation, and message routers
from auth import router as auth_router
from conversation_router import router as conv_router
from message_router import router as message_router

app.include_router(auth_router)
app.include_router(conv_router)
app.include_router(message_router)
