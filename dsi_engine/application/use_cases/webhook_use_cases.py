"""
Casos de uso para webhooks entrantes de Shopify.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from loguru import logger

from dsi_engine.infrastructure.security.webhook_signature import SignatureVerifier


class WebhookOutcome(str, Enum):
    """Resultado del manejo de un webhook."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class WebhookEvent:
    """
    Webhook tal como llego: body crudo + headers relevantes.

    Solo existe durante la verificacion; los rechazados no avanzan.
    """
    raw_body: bytes
    claimed_signature: Optional[str]
    shop_domain: Optional[str]
    topic: Optional[str] = None


WebhookReaction = Callable[[WebhookEvent], Awaitable[None]]


async def _noop_reaction(event: WebhookEvent) -> None:
    """Punto de extension: invalidacion de cache, re-sync o notificacion."""
    return None


class WebhookHandler:
    """
    Verifica la firma y, si es valida, ejecuta la reaccion configurada.

    Los rechazos se registran solo con el dominio de la tienda: nunca con el
    digest calculado ni con la firma declarada.
    """

    def __init__(
        self,
        shared_secret: Union[bytes, str, None],
        *,
        verifier: Optional[SignatureVerifier] = None,
        reaction: Optional[WebhookReaction] = None,
    ) -> None:
        self._shared_secret = shared_secret
        self._verifier = verifier or SignatureVerifier()
        self._reaction = reaction or _noop_reaction

    async def handle(self, event: WebhookEvent) -> WebhookOutcome:
        if not self._verifier.verify(event.raw_body, event.claimed_signature, self._shared_secret):
            logger.warning(f"Webhook con firma HMAC invalida (shop={event.shop_domain})")
            return WebhookOutcome.REJECTED

        logger.info(f"Webhook validado para shop: {event.shop_domain} (topic={event.topic})")
        await self._reaction(event)
        return WebhookOutcome.ACCEPTED
