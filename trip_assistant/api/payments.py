# Role: Payment webhook boundary. Needs the RAW body for signature verification, so it reads the
# Request directly instead of a pydantic body model.

import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

import trip_assistant.config as config
from trip_assistant.api.deps import payment_handler, payment_verifier
from trip_assistant.core.payments import SIGNATURE_HEADER, PaymentEventError

router = APIRouter(prefix="/api/payments", tags=["payments"])

@router.post("/webhook")
async def payment_webhook(request: Request) -> JSONResponse:
    # 1) Signature header present and valid -> else 400
    # 2) Body parses as a JSON object -> else 400
    # 3) Dispatch; handler errors -> 500
    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    if not signature:
        return JSONResponse(status_code=400, content={"error": "Missing signature"})

    if not payment_verifier.verify(signature, body):
        return JSONResponse(status_code=400, content={"error": "Invalid signature"})

    try:
        event = json.loads(body)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})
    if not isinstance(event, dict):
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})

    try:
        outcome = payment_handler.handle(event)
    except PaymentEventError as e:
        if config.DEBUG:
            print("PAYMENTS handler error:", e)
        return JSONResponse(status_code=500, content={"error": "Webhook processing failed"})

    return JSONResponse(status_code=200, content={"received": True, "outcome": outcome})
