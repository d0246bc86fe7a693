# Role: FastAPI app bootstrap. Loads environment config early, registers routers, and exposes health/docs endpoints.

from fastapi import FastAPI

import trip_assistant.config
trip_assistant.config.load_env()

from trip_assistant.api.chat import router as chat_router
from trip_assistant.api.payments import router as payments_router
from trip_assistant.api.search import router as search_router
from trip_assistant.api.state import router as state_router

app = FastAPI(title="Trip Planner API", version="0.2.0")
app.include_router(chat_router)
app.include_router(state_router)
app.include_router(search_router)
app.include_router(payments_router)

@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "Trip Planner API is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
