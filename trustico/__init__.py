"""Client for ordering SSL certificates through the Trustico reseller API."""
from .client import DEFAULT_ECHO_TEXT, TrusticoClient
from .exceptions import (
    ApplicationError,
    CallerInputError,
    CatalogError,
    ProtocolError,
    TransportError,
    TrusticoError,
)
from .models import (
    AdminContact,
    Command,
    ContactDetails,
    Credentials,
    OrderRequest,
    OrganisationDetails,
    ProcessType,
    ProductDescriptor,
    SuccessCode,
    VettingLevel,
)
from .products import PRODUCTS, get_product, load_catalog

__all__ = [
    "AdminContact",
    "ApplicationError",
    "CallerInputError",
    "CatalogError",
    "Command",
    "ContactDetails",
    "Credentials",
    "DEFAULT_ECHO_TEXT",
    "OrderRequest",
    "OrganisationDetails",
    "PRODUCTS",
    "ProcessType",
    "ProductDescriptor",
    "ProtocolError",
    "SuccessCode",
    "TransportError",
    "TrusticoClient",
    "TrusticoError",
    "VettingLevel",
    "get_product",
    "load_catalog",
]
