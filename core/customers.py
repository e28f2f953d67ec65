# =============================================================================
# core/customers.py  —  Customer & KYC Operations
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps each customer tool onto one Stables endpoint:
#
#     create_customer            POST   /api/v1/customer                      (idempotent)
#     get_customer               GET    /api/v1/customers/{id}
#     list_customers             GET    /api/v1/customers
#     update_customer            PATCH  /api/v1/customer/{id}
#     update_customer_metadata   PUT    /api/v1/customers/{id}/metadata       (idempotent)
#     get_verification_link      POST   /api/v1/customer/{id}/verification/link (idempotent)
#
#   Creates and updates use the singular "/customer" path; reads and the
#   metadata PUT use the plural "/customers".
#
#   Every function takes the shared StablesClient plus a validated input
#   model from core/schemas.py, and returns a model from core/models.py.
#   None of them format text; that is core/formatting.py's job.
# =============================================================================

import uuid

from core.client import StablesClient
from core.models import Customer, MetadataUpdate, VerificationLink, as_object, records
from core.schemas import (
    CreateCustomerInput,
    CustomerRef,
    NoInput,
    UpdateCustomerInput,
    UpdateCustomerMetadataInput,
    VerificationLinkInput,
)


async def create_customer(client: StablesClient, params: CreateCustomerInput) -> Customer:
    """Create a customer.  A random external id is generated if none is given."""
    external_id = params.external_customer_id or str(uuid.uuid4())
    data = await client.request(
        "POST",
        "/api/v1/customer",
        json=params.to_body(external_id),
        idempotent=True,
    )
    return Customer.from_dict(data)


async def get_customer(client: StablesClient, params: CustomerRef) -> Customer:
    data = await client.request("GET", f"/api/v1/customers/{params.customer_id}")
    return Customer.from_dict(data)


async def list_customers(client: StablesClient, params: NoInput) -> list[Customer]:
    data = await client.request("GET", "/api/v1/customers")
    return [Customer.from_dict(c) for c in records(as_object(data), "customers")]


async def update_customer(client: StablesClient, params: UpdateCustomerInput) -> Customer:
    """Forward a partial update; only supplied fields are sent."""
    data = await client.request(
        "PATCH",
        f"/api/v1/customer/{params.customer_id}",
        json=params.to_body(),
    )
    return Customer.from_dict(data)


async def update_customer_metadata(
    client: StablesClient, params: UpdateCustomerMetadataInput
) -> MetadataUpdate:
    await client.request(
        "PUT",
        f"/api/v1/customers/{params.customer_id}/metadata",
        json=params.to_body(),
        idempotent=True,
    )
    return MetadataUpdate(customer_id=params.customer_id, keys=list(params.metadata))


async def get_verification_link(
    client: StablesClient, params: VerificationLinkInput
) -> VerificationLink:
    data = await client.request(
        "POST",
        f"/api/v1/customer/{params.customer_id}/verification/link",
        json=params.to_body(),
        idempotent=True,
    )
    return VerificationLink.from_dict(data)
