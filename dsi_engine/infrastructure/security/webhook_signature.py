"""
Verificacion de autenticidad de webhooks (HMAC-SHA256 en base64).

IMPORTANTE:
- El HMAC se calcula sobre los bytes crudos del request, nunca sobre un JSON
  re-serializado.
- La comparacion es en tiempo constante (hmac.compare_digest).
- Nunca lanza por datos invalidos: cualquier falta o diferencia es False.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional, Union


def compute_signature(raw_body: bytes, shared_secret: Union[bytes, str]) -> str:
    """Digest HMAC-SHA256 del body codificado en base64 estandar."""
    if isinstance(shared_secret, str):
        shared_secret = shared_secret.encode("utf-8")
    digest = hmac.new(shared_secret, raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class SignatureVerifier:
    """
    Verifica la firma declarada de un webhook contra el secreto compartido.
    """

    def verify(
        self,
        raw_body: Optional[bytes],
        claimed_signature: Optional[str],
        shared_secret: Union[bytes, str, None],
    ) -> bool:
        if not raw_body or not claimed_signature or not shared_secret:
            return False

        expected = compute_signature(raw_body, shared_secret)
        # Igualdad exacta (sin normalizar espacios); bytes para tolerar firmas no-ASCII
        return hmac.compare_digest(
            expected.encode("ascii"),
            claimed_signature.encode("utf-8"),
        )
