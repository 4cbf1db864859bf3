"""
Razorpay Webhook Endpoint

Verifies the webhook signature over the raw body, decodes the event and
hands it to the event router. Responses are plain text; the status code
tells Razorpay whether to redeliver.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from app.handlers.event_router import get_event_router
from app.services.razorpay_service import EVENT_ID_HEADER, razorpay_service
from app.utils.exceptions import RelayException
from app.utils.logging_config import get_logger, set_razorpay_event_id

logger = get_logger(__name__)

router = APIRouter(tags=["webhook"])


@router.post("/razorpay-webhook", response_class=PlainTextResponse)
async def razorpay_webhook(request: Request):
    """
    Razorpay webhook endpoint.

    The secret and signature header are checked before the body is read,
    and the body is parsed only after its signature has been verified.
    """
    event_id = request.headers.get(EVENT_ID_HEADER)
    set_razorpay_event_id(event_id)

    try:
        razorpay_service.ensure_configured()
        signature = razorpay_service.extract_signature(request)

        payload = await request.body()
        razorpay_service.verify_webhook_signature(payload, signature)
        event = razorpay_service.parse_event(payload)

        logger.info(
            "Received Razorpay webhook event",
            extra={"event_type": event.event, "event_id": event_id},
        )

        result = await get_event_router().route_event(event)

    except RelayException as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            f"Webhook rejected: {e.message}",
            extra={"error": e.to_dict(), "status_code": e.status_code},
        )
        return PlainTextResponse(e.message, status_code=e.status_code)

    return PlainTextResponse(result.message, status_code=result.status_code)
