"""
Endpoint receptor de webhooks de Shopify.

El body se lee en bytes crudos ANTES de cualquier parseo JSON: la firma
HMAC se calcula sobre esos bytes exactos.
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse

from dsi_engine.api.v1.dependencies.service_deps import get_webhook_handler
from dsi_engine.application.use_cases.webhook_use_cases import (
    WebhookEvent,
    WebhookHandler,
    WebhookOutcome,
)
from dsi_engine.shared.utils.audit_logger import AuditLogger

HMAC_HEADER = "X-Shopify-Hmac-Sha256"
SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"
TOPIC_HEADER = "X-Shopify-Topic"


router = APIRouter(prefix="/webhook", tags=["Webhooks"])


@router.post("/rules_update", response_class=PlainTextResponse)
async def rules_update(
    request: Request,
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> PlainTextResponse:
    """
    Recibe webhooks de productos/metafields.

    - 401 "Invalid signature." si la firma no valida
    - 200 "Webhook processed" si valida
    """
    event = WebhookEvent(
        raw_body=await request.body(),
        claimed_signature=request.headers.get(HMAC_HEADER),
        shop_domain=request.headers.get(SHOP_DOMAIN_HEADER),
        topic=request.headers.get(TOPIC_HEADER),
    )

    outcome = await handler.handle(event)
    AuditLogger.log_webhook(event.shop_domain, event.topic, accepted=outcome is WebhookOutcome.ACCEPTED)

    if outcome is WebhookOutcome.REJECTED:
        return PlainTextResponse("Invalid signature.", status_code=status.HTTP_401_UNAUTHORIZED)
    return PlainTextResponse("Webhook processed", status_code=status.HTTP_200_OK)
