"""Flatten structured order requests into the flat fields posted to the API.

Every wire name used by the order commands lives in the tables below so they
can be checked against the reseller API documentation in a single place.
"""
from __future__ import annotations

from dataclasses import fields as dataclass_fields
from datetime import date
from typing import Any, Mapping

from .models import AdminContact, ContactDetails, OrderRequest, OrganisationDetails

ORDER_FIELDS: Mapping[str, str] = {
    "product": "ProductName",
    "csr": "CSR",
    "period": "ValidityPeriod",
    "approver": "ApproverEmail",
    "insurance": "Insurance",
    "server_count": "ServerCount",
    "no_validation": "NoValidation",
    "special": "SpecialInstructions",
    "tech_use_reseller": "TechUseReseller",
}

CONTACT_FIELDS: Mapping[str, str] = {
    "title": "Title",
    "first_name": "FirstName",
    "last_name": "LastName",
    "organisation": "Organization",
    "role": "Role",
    "email": "Email",
    "phone_cc": "PhoneCC",
    "phone_ac": "PhoneAC",
    "phone_n": "PhoneN",
    "address1": "Address1",
    "address2": "Address2",
    "city": "City",
    "state": "State",
    "postcode": "PostCode",
    "country": "Country",
    "tax_id": "TaxID",
    "membership_date": "MemDate",
}

ORGANISATION_FIELDS: Mapping[str, str] = {
    "name": "Name",
    "registration_number": "RegistrationNumber",
    "address1": "Address1",
    "address2": "Address2",
    "city": "City",
    "state": "State",
    "postcode": "PostCode",
    "country": "Country",
    "phone_cc": "PhoneCC",
    "phone_ac": "PhoneAC",
    "phone_n": "PhoneN",
}

ADMIN_PREFIX = "Admin"
TECH_PREFIX = "Tech"
ORGANISATION_PREFIX = "Org"


def to_wire_value(value: Any) -> str | None:
    """Render a Python value with the API's string conventions."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _flatten(source: Any, names: Mapping[str, str], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for item in dataclass_fields(source):
        wire_name = names.get(item.name)
        if wire_name is None:
            continue
        value = to_wire_value(getattr(source, item.name))
        if value is not None:
            flat[f"{prefix}{wire_name}"] = value
    return flat


def contact_fields(contact: ContactDetails | AdminContact, prefix: str) -> dict[str, str]:
    return _flatten(contact, CONTACT_FIELDS, prefix)


def organisation_fields(organisation: OrganisationDetails) -> dict[str, str]:
    return _flatten(organisation, ORGANISATION_FIELDS, ORGANISATION_PREFIX)


def order_fields(request: OrderRequest, *, include_organisation: bool) -> dict[str, str]:
    """Return the flat field map for *request*.

    The technical contact is skipped when the reseller defaults are reused and
    the organisation group only travels when the product's vetting asks for it.
    """

    flat = _flatten(request, ORDER_FIELDS)
    flat.update(contact_fields(request.admin, ADMIN_PREFIX))
    if request.tech is not None and not request.tech_use_reseller:
        flat.update(contact_fields(request.tech, TECH_PREFIX))
    if include_organisation and request.organisation is not None:
        flat.update(organisation_fields(request.organisation))
    return flat


__all__ = [
    "CONTACT_FIELDS",
    "ORDER_FIELDS",
    "ORGANISATION_FIELDS",
    "contact_fields",
    "order_fields",
    "organisation_fields",
    "to_wire_value",
]
