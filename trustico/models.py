"""Value objects exchanged between callers and the Trustico client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Tuple


class Command(str, Enum):
    """Operation names understood by the reseller API."""

    HELLO = "Hello"
    GET_STATUS = "GetStatus"
    PROCESS_TYPE_1 = "ProcessType1"
    PROCESS_TYPE_2 = "ProcessType2"


class SuccessCode(str, Enum):
    """Literal values of the ``SuccessCode`` response record."""

    SUCCESS = "1"
    FAILURE = "0"


class ProcessType(str, Enum):
    """Server-side processing selector attached to every product."""

    TYPE_1 = "1"
    TYPE_2 = "2"

    @property
    def command(self) -> Command:
        if self is ProcessType.TYPE_1:
            return Command.PROCESS_TYPE_1
        return Command.PROCESS_TYPE_2


class VettingLevel(str, Enum):
    """Identity verification tier required by a product."""

    DOM = "DOM"
    ORG = "ORG"
    EV = "EV"

    @property
    def requires_organisation(self) -> bool:
        return self is not VettingLevel.DOM


@dataclass(frozen=True, slots=True)
class Credentials:
    """Reseller account credentials attached to every request."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class ProductDescriptor:
    """Catalog entry describing how a product must be ordered."""

    code: str
    name: str
    periods: Tuple[int, ...]
    vetting: VettingLevel
    process: str
    reissuance: bool = False
    can_renew: bool = False

    def allows_period(self, months: int) -> bool:
        return months in self.periods


@dataclass(frozen=True, slots=True)
class ContactDetails:
    """Contact group sent for the technical contact of an order."""

    title: str
    first_name: str
    last_name: str
    organisation: str
    email: str
    phone_cc: str
    phone_ac: str
    phone_n: str
    address1: str
    city: str
    state: str
    postcode: str
    country: str
    address2: str | None = None


@dataclass(frozen=True, slots=True)
class AdminContact(ContactDetails):
    """Administrative contact: the technical fields plus role and optional tax data."""

    role: str = ""
    tax_id: str | None = None
    membership_date: date | None = None


@dataclass(frozen=True, slots=True)
class OrganisationDetails:
    """Organisation identity required by ORG and EV vetted products."""

    name: str
    address1: str
    city: str
    state: str
    postcode: str
    country: str
    phone_cc: str
    phone_ac: str
    phone_n: str
    address2: str | None = None
    registration_number: str | None = None


@dataclass(frozen=True, slots=True)
class OrderRequest:
    """Everything needed to submit a certificate order."""

    product: str
    csr: str
    period: int
    approver: str
    admin: AdminContact
    tech: ContactDetails | None = None
    organisation: OrganisationDetails | None = None
    insurance: bool = False
    server_count: int = 1
    no_validation: bool = False
    special: str | None = None
    tech_use_reseller: bool = False


__all__ = [
    "AdminContact",
    "Command",
    "ContactDetails",
    "Credentials",
    "OrderRequest",
    "OrganisationDetails",
    "ProcessType",
    "ProductDescriptor",
    "SuccessCode",
    "VettingLevel",
]
