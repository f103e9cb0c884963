"""
HTTP Courier Adapter.

Creates and tracks consignments against a JSON courier API configured at
runtime. Consignment creation never fails the caller: any provider problem
falls back to a locally generated consignment with a warning.
"""
import asyncio
import logging
import random
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import aiohttp

from core.application.interfaces import (
    GENERATED_BY_API,
    GENERATED_BY_LOCAL,
    ConsignmentResult,
    CourierConfig,
    ICourierGateway,
    IMarketplaceConfigProvider,
    TrackingResult,
)
from core.domain.entities import Order
from core.domain.enums import PaymentStatus
from core.domain.result import ErrorKind, Outcome
from core.domain.value_objects import ZERO

from .response_parser import parse_consignment, parse_tracking

logger = logging.getLogger(__name__)

LOCAL_PROVIDER = "local"
NOT_CONFIGURED_WARNING = "Courier API is not configured; generated a local consignment"
PATH_PLACEHOLDERS = ("{id}", ":id")


class CourierApiError(Exception):
    """Raised for transport, status or payload problems with the courier API."""


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def tracking_target(config: CourierConfig, reference: str) -> Tuple[str, Dict[str, str]]:
    """
    Resolve the tracking URL for a consignment reference.

    A ``{id}`` or ``:id`` placeholder in the tracking path is substituted;
    otherwise the reference is sent as the ``consignment_id`` query parameter.
    """
    path = config.tracking_path
    for placeholder in PATH_PLACEHOLDERS:
        if placeholder in path:
            return build_url(config.base_url, path.replace(placeholder, quote(reference, safe=""))), {}
    return build_url(config.base_url, path), {"consignment_id": reference}


def build_headers(config: CourierConfig) -> Dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if config.bearer_token:
        headers["Authorization"] = f"Bearer {config.bearer_token}"
    if config.api_key:
        headers["Api-Key"] = config.api_key
    if config.secret_key:
        headers["Secret-Key"] = config.secret_key
    return headers


def build_consignment_payload(order: Order) -> Dict[str, Any]:
    """Normalized create-consignment body: recipient, collect amount and items."""
    address = order.shipping_address
    cod_amount = ZERO if order.payment_status == PaymentStatus.COMPLETED else order.total
    return {
        "invoice": order.number,
        "recipient_name": address.full_name,
        "recipient_phone": address.phone,
        "recipient_email": address.email,
        "recipient_address": address.one_line(),
        "recipient_city": address.city,
        "recipient_postal_code": address.postal_code,
        "cod_amount": str(cod_amount),
        "note": order.notes,
        "items": [
            {
                "name": item.title or item.product_id,
                "sku": item.sku,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price),
            }
            for item in order.items
        ],
    }


class CourierAdapter(ICourierGateway):
    """
    aiohttp implementation of the courier gateway.

    Configuration is read from the provider on every call so admin changes
    apply without a restart.
    """

    def __init__(self, config_provider: IMarketplaceConfigProvider):
        self._config_provider = config_provider

    async def generate_consignment(self, order: Order) -> ConsignmentResult:
        config = await self._config_provider.get_courier_config()
        if not config.can_create_consignments:
            return self.build_local_consignment(order, warning=NOT_CONFIGURED_WARNING)

        try:
            payload = await self._request(
                config,
                "POST",
                build_url(config.base_url, config.consignment_path),
                json=build_consignment_payload(order),
            )
        except CourierApiError as e:
            logger.warning(f"❌ Courier consignment failed for {order.number}: {e}")
            return self.build_local_consignment(
                order, warning=f"Courier API unavailable ({e}); generated a local consignment"
            )

        fields = parse_consignment(payload)
        if not fields["consignment_id"]:
            logger.warning(f"❌ Courier response for {order.number} has no consignment id")
            return self.build_local_consignment(
                order, warning="Courier API response had no consignment id; generated a local consignment"
            )

        logger.info(f"✅ Courier consignment {fields['consignment_id']} created for {order.number}")
        return ConsignmentResult(
            consignment_id=fields["consignment_id"],
            provider=config.provider,
            generated_by=GENERATED_BY_API,
            tracking_number=fields["tracking_number"],
            tracking_url=fields["tracking_url"],
            label_url=fields["label_url"],
            status=fields["status"],
        )

    def build_local_consignment(self, order: Order, warning: Optional[str] = None) -> ConsignmentResult:
        consignment_id = f"{order.number}-{random.randint(1000, 9999)}"
        return ConsignmentResult(
            consignment_id=consignment_id,
            provider=LOCAL_PROVIDER,
            generated_by=GENERATED_BY_LOCAL,
            tracking_number=consignment_id,
            status="created",
            warning=warning,
        )

    async def fetch_tracking(self, order: Order) -> Outcome[TrackingResult]:
        reference = order.courier.reference
        if not reference:
            return Outcome.failure(ErrorKind.VALIDATION, "Order has no courier consignment to sync")

        config = await self._config_provider.get_courier_config()
        if not config.can_track:
            return Outcome.failure(ErrorKind.VALIDATION, "Courier tracking is not configured")

        url, params = tracking_target(config, reference)
        try:
            payload = await self._request(config, "GET", url, params=params)
        except CourierApiError as e:
            logger.error(f"❌ Courier tracking failed for {order.number}: {e}")
            return Outcome.failure(ErrorKind.EXTERNAL, f"Courier tracking failed: {e}")

        fields = parse_tracking(payload)
        return Outcome.success(
            TrackingResult(
                status=fields["status"],
                tracking_url=fields["tracking_url"],
                events=fields["events"],
            )
        )

    async def _request(self, config: CourierConfig, method: str, url: str, **kwargs) -> Any:
        timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=build_headers(config)) as session:
                async with session.request(method, url, **kwargs) as response:
                    if response.status < 200 or response.status >= 300:
                        error_text = await response.text()
                        raise CourierApiError(f"HTTP {response.status}: {error_text[:200]}")
                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise CourierApiError(f"invalid JSON response: {e}") from e
        except aiohttp.ClientError as e:
            raise CourierApiError(str(e) or e.__class__.__name__) from e
        except asyncio.TimeoutError as e:
            raise CourierApiError("request timed out") from e
