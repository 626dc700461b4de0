"""Stripe PaymentIntents over the REST API."""
from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from rental_service.application.exceptions import PaymentGatewayError, ValidationError
from rental_service.application.ports.payments import PaymentIntent

logger = logging.getLogger(__name__)

_INTENT_ID = re.compile(r"pi_[A-Za-z0-9_]+")


class StripeGateway:
    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def create_intent(
        self, amount_minor: int, currency: str, metadata: dict[str, str],
    ) -> PaymentIntent:
        form = {"amount": str(amount_minor), "currency": currency}
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value
        data = await self._request("POST", "/v1/payment_intents", data=form)
        return self._to_intent(data)

    async def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        if not _INTENT_ID.fullmatch(intent_id):
            raise ValidationError("Invalid payment intent id")
        data = await self._request("GET", f"/v1/payment_intents/{intent_id}")
        return self._to_intent(data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._secret_key:
            raise PaymentGatewayError("Payment provider is not configured")
        async with httpx.AsyncClient(
            base_url=self._api_base,
            auth=(self._secret_key, ""),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                resp = await client.request(method, path, **kwargs)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.warning("Stripe %s %s -> %s", method, path, exc.response.status_code)
                raise PaymentGatewayError(_error_message(exc.response)) from exc
            except httpx.HTTPError as exc:
                logger.warning("Stripe %s %s failed: %s", method, path, exc)
                raise PaymentGatewayError("Payment provider unavailable") from exc
        return resp.json()

    @staticmethod
    def _to_intent(data: dict[str, Any]) -> PaymentIntent:
        return PaymentIntent(
            id=data["id"],
            status=data.get("status", "unknown"),
            client_secret=data.get("client_secret"),
            metadata=dict(data.get("metadata") or {}),
        )


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"Payment provider error ({response.status_code})"
