from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from pydantic import ValidationError
from twilio.twiml.messaging_response import MessagingResponse

from app.application.dto.inbound_message import TwilioInboundDTO
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from app.infrastructure.whatsapp.webhook_verify import verify_twilio_signature
from app.wiring.dependencies import get_handle_incoming_message_use_case
from app.core.config import settings


router = APIRouter()
logger = logging.getLogger(__name__)


def _empty_twiml() -> Response:
    return Response(content=str(MessagingResponse()), media_type="application/xml")


@router.post("/webhooks/whatsapp")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> Response:
    try:
        form = await request.form()
        params = {key: str(value) for key, value in form.items()}

        url = settings.PUBLIC_WEBHOOK_URL or str(request.url)
        signature = request.headers.get("X-Twilio-Signature")
        if not verify_twilio_signature(url, params, signature, settings.TWILIO_AUTH_TOKEN, settings.ENV):
            return Response(status_code=403)

        try:
            inbound = TwilioInboundDTO.model_validate(params)
        except ValidationError:
            logger.warning("Invalid Twilio payload", extra={"reason": "missing From"})
            return Response(status_code=400)

        message = inbound.to_message()
        logger.info("Webhook received", extra={"user_id": message.user_id, "message_id": message.id})

        # Acknowledge first; the reply goes out through the messaging API.
        background_tasks.add_task(use_case.handle, message)
        return _empty_twiml()
    except Exception as e:
        logger.exception("Fatal error in webhook handler", extra={"reason": str(e)})
        return Response(status_code=500)
