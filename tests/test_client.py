from __future__ import annotations

from types import MappingProxyType
from typing import Callable
from urllib.parse import parse_qsl

import httpx
import pytest

from trustico import (
    DEFAULT_ECHO_TEXT,
    PRODUCTS,
    AdminContact,
    ApplicationError,
    CallerInputError,
    Command,
    ContactDetails,
    OrderRequest,
    OrganisationDetails,
    ProductDescriptor,
    ProtocolError,
    TransportError,
    TrusticoClient,
    VettingLevel,
)

API_URL = "https://api.ssl-processing.com/geodirect/postapi/"

CONTACT = dict(
    title="Ms",
    first_name="Eliza",
    last_name="Xample",
    organisation="E.Xample",
    email="e.xample@example.com",
    phone_cc="44",
    phone_ac="020",
    phone_n="9460234",
    address1="1 High Street",
    city="MyTown",
    state="London",
    postcode="SW1 4AA",
    country="GB",
)

ORGANISATION = OrganisationDetails(
    name="E.Xample Ltd",
    address1="1 High Street",
    city="MyTown",
    state="London",
    postcode="SW1 4AA",
    country="GB",
    phone_cc="44",
    phone_ac="020",
    phone_n="9460234",
)


def _descriptor(code: str, *, process: str, vetting: VettingLevel = VettingLevel.DOM):
    return ProductDescriptor(
        code=code,
        name=code.title(),
        periods=(12, 24),
        vetting=vetting,
        process=process,
    )


CATALOG = MappingProxyType(
    {
        "typeone": _descriptor("typeone", process="1"),
        "typetwo": _descriptor("typetwo", process="2", vetting=VettingLevel.ORG),
        "misconfigured": _descriptor("misconfigured", process="3"),
    }
)


class RecordingTransport:
    """Collect the posted form fields and answer with a canned body."""

    def __init__(self, body: str = "SuccessCode|1|\n", status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[dict[str, str]] = []
        self.urls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        self.urls.append(str(request.url))
        self.requests.append(dict(parse_qsl(request.content.decode(), keep_blank_values=True)))
        return httpx.Response(self.status_code, text=self.body)


def _client(
    handler: Callable[[httpx.Request], httpx.Response], **kwargs
) -> TrusticoClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return TrusticoClient("reseller", "s3cret", client=http_client, **kwargs)


def _order(**overrides) -> OrderRequest:
    values = dict(
        product="typeone",
        csr="-----BEGIN CERTIFICATE REQUEST-----",
        period=12,
        approver="admin@example.com",
        admin=AdminContact(**CONTACT, role="WebSite Owner"),
        tech=ContactDetails(**CONTACT),
    )
    values.update(overrides)
    return OrderRequest(**values)


def test_construction_does_not_touch_the_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("Unexpected request")

    client = _client(handler)

    assert client.credentials.username == "reseller"
    assert "s3cret" not in repr(client.credentials)
    assert client.url == API_URL


def test_request_posts_credentials_and_command():
    transport = RecordingTransport("SuccessCode|1|\nOrderID|A123|\n")
    client = _client(transport)

    result = client.request(Command.GET_STATUS, {"OrderID": "A123"})

    assert result == {"OrderID": "A123"}
    assert transport.urls == [API_URL]
    assert transport.requests == [
        {
            "Command": "GetStatus",
            "UserName": "reseller",
            "Password": "s3cret",
            "OrderID": "A123",
        }
    ]


@pytest.mark.parametrize("reserved", ["Command", "UserName", "Password"])
def test_reserved_fields_cannot_be_overridden(reserved):
    transport = RecordingTransport()
    client = _client(transport)

    with pytest.raises(CallerInputError):
        client.request(Command.HELLO, {reserved: "x"})

    assert transport.requests == []


def test_hello_sends_default_text_when_none_given():
    transport = RecordingTransport(f"SuccessCode|1|\nTextToEcho|{DEFAULT_ECHO_TEXT}|\n")
    client = _client(transport)

    assert client.hello() is True
    assert client.hello("") is True
    assert [sent["TextToEcho"] for sent in transport.requests] == [DEFAULT_ECHO_TEXT] * 2
    assert transport.requests[0]["Command"] == "Hello"


@pytest.mark.parametrize(
    "body, expected",
    [
        ("SuccessCode|1|\nTextToEcho|hello|\n", True),
        ("SuccessCode|1|\nTextToEcho|Hello|\n", False),
        ("SuccessCode|1|\nTextToEcho|hello |\n", False),
        ("SuccessCode|1|\n", False),
        ("SuccessCode|0|\nTextToEcho|hello|\nError|Bad login|\n", False),
    ],
)
def test_hello_requires_success_and_exact_echo(body, expected):
    client = _client(RecordingTransport(body))

    assert client.hello("hello") is expected


def test_hello_propagates_transport_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(TransportError):
        client.hello()


def test_non_success_http_status_is_a_transport_error():
    client = _client(RecordingTransport("SuccessCode|1|\n", status_code=503))

    with pytest.raises(TransportError):
        client.status(order_id="A123")


def test_timeout_is_a_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)

    with pytest.raises(TransportError) as error:
        client.status(order_id="A123")

    assert isinstance(error.value.__cause__, httpx.ReadTimeout)


def test_application_error_carries_server_message():
    client = _client(RecordingTransport("SuccessCode|0|\nError|Invalid CSR|\n"), catalog=CATALOG)

    with pytest.raises(ApplicationError) as error:
        client.order(_order())

    assert error.value.message == "Invalid CSR"


def test_malformed_body_is_a_protocol_error():
    client = _client(RecordingTransport("<html>Service unavailable</html>\n"))

    with pytest.raises(ProtocolError):
        client.status(order_id="A123")


def test_unknown_success_code_is_a_protocol_error():
    client = _client(RecordingTransport("SuccessCode|2|\nOrderID|A123|\n"))

    with pytest.raises(ProtocolError):
        client.status(order_id="A123")


def test_status_uses_mutually_exclusive_identifiers():
    transport = RecordingTransport("SuccessCode|1|\nStatus|Issued|\n")
    client = _client(transport)

    assert client.status(order_id="X") == {"Status": "Issued"}
    client.status(issuer_order_id="Y")

    by_order, by_issuer = transport.requests
    assert by_order["OrderID"] == "X" and "IssuerOrderID" not in by_order
    assert by_issuer["IssuerOrderID"] == "Y" and "OrderID" not in by_issuer
    assert TrusticoClient.status_fields(order_id="X") == {"OrderID": "X"}
    assert TrusticoClient.status_fields(issuer_order_id="Y") == {"IssuerOrderID": "Y"}


@pytest.mark.parametrize(
    "identifiers", [{}, {"order_id": "", "issuer_order_id": None}, {"order_id": "X", "issuer_order_id": "Y"}]
)
def test_status_requires_exactly_one_identifier(identifiers):
    transport = RecordingTransport()
    client = _client(transport)

    with pytest.raises(CallerInputError):
        client.status(**identifiers)

    assert transport.requests == []


def test_products_is_static_and_offline():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("Unexpected request")

    client = _client(handler)

    assert client.products() is client.products() is PRODUCTS
    assert "rapidssl" in client.products()


def test_order_selects_command_from_processing_type():
    transport = RecordingTransport("SuccessCode|1|\nOrderID|A123|\n")
    client = _client(transport, catalog=CATALOG)

    assert client.order(_order()) == {"OrderID": "A123"}
    client.order(_order(product="typetwo", organisation=ORGANISATION))

    type_one, type_two = transport.requests
    assert type_one["Command"] == "ProcessType1"
    assert type_one["ProductName"] == "typeone"
    assert not any(name.startswith("Org") for name in type_one)
    assert type_two["Command"] == "ProcessType2"
    assert type_two["OrgName"] == "E.Xample Ltd"


def test_order_with_packaged_catalog_uses_type_one():
    transport = RecordingTransport("SuccessCode|1|\nOrderID|A123|\n")
    client = _client(transport)

    client.order(_order(product="rapidssl", period=24))

    assert transport.requests[0]["Command"] == "ProcessType1"
    assert transport.requests[0]["ValidityPeriod"] == "24"


@pytest.mark.parametrize(
    "overrides",
    [
        {"product": "misconfigured"},
        {"product": "unknown"},
        {"period": 36},
        {"approver": "ceo@example.com"},
        {"approver": "admin"},
        {"csr": "  "},
        {"server_count": 0},
        {"special": "x" * 256},
        {"tech": None},
        {"admin": AdminContact(**CONTACT)},
        {"admin": None},
        {"product": "typetwo"},
    ],
)
def test_order_rejects_invalid_input_before_network(overrides):
    transport = RecordingTransport()
    client = _client(transport, catalog=CATALOG)

    with pytest.raises(CallerInputError):
        client.order(_order(**overrides))

    assert transport.requests == []


def test_order_accepts_deferred_csr_and_reseller_tech_contact():
    transport = RecordingTransport("SuccessCode|1|\nOrderID|A124|\n")
    client = _client(transport, catalog=CATALOG)

    result = client.order(
        _order(csr="", no_validation=True, tech=None, tech_use_reseller=True, special="Rush")
    )

    sent = transport.requests[0]
    assert result == {"OrderID": "A124"}
    assert sent["NoValidation"] == "1"
    assert sent["TechUseReseller"] == "1"
    assert sent["SpecialInstructions"] == "Rush"
    assert "TechEmail" not in sent


def test_client_closes_only_owned_http_client():
    http_client = httpx.Client(transport=httpx.MockTransport(RecordingTransport()))

    with TrusticoClient("reseller", "s3cret", client=http_client):
        pass
    assert not http_client.is_closed

    with TrusticoClient("reseller", "s3cret") as owned:
        pass
    assert owned._client.is_closed


@pytest.mark.parametrize("timeout", [None, 12.5])
def test_timeout_applies_to_injected_http_client(timeout):
    seen: list[dict[str, float]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, text="SuccessCode|1|\nTextToEcho|x|\n")

    kwargs = {} if timeout is None else {"timeout": timeout}
    client = _client(handler, **kwargs)

    assert client.hello("x") is True
    expected = 30.0 if timeout is None else timeout
    assert client.timeout == expected
    assert seen == [{"connect": expected, "read": expected, "write": expected, "pool": expected}]
