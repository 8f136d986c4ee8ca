"""HTTP client for the Trustico reseller API."""

from __future__ import annotations

from typing import Mapping, Optional

import httpx

from .config import Settings, settings
from .exceptions import ApplicationError, CallerInputError, ProtocolError, TransportError
from .fields import order_fields
from .logging import get_logger, request_context
from .models import (
    Command,
    Credentials,
    OrderRequest,
    ProcessType,
    ProductDescriptor,
    SuccessCode,
)
from .products import PRODUCTS, get_product
from .protocol import interpret_response, parse_records, parse_success_code

DEFAULT_ECHO_TEXT = "Trustico API test string"
"""Text echoed by :meth:`TrusticoClient.hello` when the caller supplies none."""

RESERVED_FIELDS = frozenset({"Command", "UserName", "Password"})
APPROVER_MAILBOXES = frozenset(
    {"admin", "administrator", "hostmaster", "root", "webmaster", "postmaster"}
)
MAX_SPECIAL_INSTRUCTIONS = 255

logger = get_logger(__name__)


class TrusticoClient:
    """Submit certificate orders and status queries to the reseller API."""

    def __init__(
        self,
        username: str,
        password: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        catalog: Mapping[str, ProductDescriptor] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.credentials = Credentials(username=username, password=password)
        self.url = base_url or settings.api_url
        self._catalog = PRODUCTS if catalog is None else catalog
        self.timeout = settings.timeout if timeout is None else timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.timeout)

    @classmethod
    def from_settings(cls, config: Settings = settings, **kwargs) -> "TrusticoClient":
        """Build a client from the configured reseller account."""

        kwargs.setdefault("base_url", config.api_url)
        kwargs.setdefault("timeout", config.timeout)
        return cls(config.username, config.password, **kwargs)

    def close(self) -> None:
        """Release underlying HTTP resources if we created the client."""

        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TrusticoClient":
        return self

    def __exit__(self, *_: object) -> Optional[bool]:
        self.close()
        return None

    def hello(self, text: str | None = None) -> bool:
        """Check connectivity by asking the API to echo *text* back.

        Returns ``False`` when the API rejects the call or echoes something
        else; transport and protocol failures still raise.
        """

        text = text or DEFAULT_ECHO_TEXT
        try:
            response = self.request(Command.HELLO, {"TextToEcho": text})
        except ApplicationError:
            return False
        return response.get("TextToEcho") == text

    def order(self, request: OrderRequest) -> dict[str, str]:
        """Submit *request* and return the order confirmation fields."""

        product = get_product(request.product, self._catalog)
        command = self.resolve_command(product)
        self._validate_order(request, product)
        fields = order_fields(
            request, include_organisation=product.vetting.requires_organisation
        )
        return self.request(command, fields)

    def status(
        self, order_id: str | None = None, issuer_order_id: str | None = None
    ) -> dict[str, str]:
        """Return the status fields of an order by internal or issuer identifier."""

        return self.request(Command.GET_STATUS, self.status_fields(order_id, issuer_order_id))

    def products(self) -> Mapping[str, ProductDescriptor]:
        """Return the read-only product catalog without touching the network."""

        return self._catalog

    @staticmethod
    def resolve_command(product: ProductDescriptor) -> Command:
        """Map the product's processing selector to the order command variant."""

        try:
            return ProcessType(product.process).command
        except ValueError:
            raise CallerInputError(
                f"Product '{product.code}' has an unknown processing type {product.process!r}"
            ) from None

    @staticmethod
    def status_fields(
        order_id: str | None = None, issuer_order_id: str | None = None
    ) -> dict[str, str]:
        if order_id and issuer_order_id:
            raise CallerInputError("Supply either an order id or an issuer order id, not both")
        if order_id:
            return {"OrderID": order_id}
        if issuer_order_id:
            return {"IssuerOrderID": issuer_order_id}
        raise CallerInputError("An order id or an issuer order id is required")

    def build_request(
        self, command: Command, fields: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Compose the form fields posted for *command*."""

        payload = {
            "Command": Command(command).value,
            "UserName": self.credentials.username,
            "Password": self.credentials.password,
        }
        if fields:
            reserved = RESERVED_FIELDS.intersection(fields)
            if reserved:
                raise CallerInputError(
                    f"Reserved fields cannot be overridden: {', '.join(sorted(reserved))}"
                )
            payload.update(fields)
        return payload

    def request(
        self, command: Command, fields: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Run one request/response cycle and return the parsed result fields."""

        payload = self.build_request(command, fields)
        with request_context(command=payload["Command"]):
            logger.info("trustico.request.start", field_count=len(payload))
            try:
                response = self._client.post(self.url, data=payload, timeout=self.timeout)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error("trustico.request.transport_error", error=str(exc))
                raise TransportError(f"Unable to connect to the Trustico API: {exc}") from exc

            try:
                records = parse_records(response.text)
                success = parse_success_code(records)
            except ProtocolError as exc:
                logger.error("trustico.request.protocol_error", error=str(exc))
                raise
            if success is SuccessCode.FAILURE:
                logger.warning("trustico.request.rejected", error=records.get("Error"))
            result = interpret_response(records)
            logger.info("trustico.request.completed", result_fields=sorted(result))
            return result

    def _validate_order(self, request: OrderRequest, product: ProductDescriptor) -> None:
        if not product.allows_period(request.period):
            allowed = ", ".join(str(months) for months in product.periods)
            raise CallerInputError(
                f"Period {request.period} is not available for '{product.code}' (allowed: {allowed})"
            )
        mailbox, _, domain = (request.approver or "").partition("@")
        if mailbox.lower() not in APPROVER_MAILBOXES or not domain:
            raise CallerInputError(f"Invalid approver address '{request.approver}'")
        if not (request.csr or "").strip() and not request.no_validation:
            raise CallerInputError("A CSR is required unless validation is deferred")
        if request.server_count < 1:
            raise CallerInputError("At least one server licence is required")
        if request.special and len(request.special) > MAX_SPECIAL_INSTRUCTIONS:
            raise CallerInputError(
                f"Special instructions are limited to {MAX_SPECIAL_INSTRUCTIONS} characters"
            )
        if request.admin is None:
            raise CallerInputError("An admin contact is required")
        if not request.admin.role:
            raise CallerInputError("The admin contact requires a role")
        if request.tech is None and not request.tech_use_reseller:
            raise CallerInputError(
                "A tech contact is required unless the reseller defaults are used"
            )
        if product.vetting.requires_organisation and request.organisation is None:
            raise CallerInputError(
                f"Product '{product.code}' requires organisation details"
            )


__all__ = ["DEFAULT_ECHO_TEXT", "TrusticoClient"]
