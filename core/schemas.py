# =============================================================================
# core/schemas.py  —  Tool Input Schemas (what the agent is allowed to send)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares, for every tool, the accepted arguments: their types, enums,
#   and which ones are required.  core/toolkit.py validates the agent's raw
#   arguments against these models BEFORE any network call; a
#   ValidationError means zero requests were made.
#
#   Each model also knows how to shape its own request:
#     to_body()   → JSON body (wire field names, None values dropped)
#     to_query()  → query-string params (only supplied values)
#
#   Path identifiers (customer_id, quote_id, ...) use the Identifier type:
#   surrounding whitespace is stripped and an empty id is rejected.
# =============================================================================

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from core.client import build_query

Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Email = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]
HttpUrl = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^https?://\S+$")]
DateString = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^\d{4}-\d{2}-\d{2}$")]
Amount = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^\d+(\.\d+)?$")]
PositiveInt = Annotated[int, Field(ge=1)]
Metadata = dict[str, str]

CustomerType = Literal["individual", "business"]
QuoteNetwork = Literal["ethereum", "polygon", "polygon-amoy"]
PaymentMethodType = Literal["SWIFT", "LOCAL"]
TransferStatus = Literal["PENDING", "IN_PROGRESS", "COMPLETED", "FAILED", "CANCELLED", "EXPIRED"]
TransferType = Literal["TRANSFER_TYPE_ONRAMP", "TRANSFER_TYPE_OFFRAMP"]
VirtualAccountStatus = Literal["activated", "deactivated", "pending", "closed"]
DepositHandlingMode = Literal["auto_payout", "hold", "manual"]
PaymentRail = Literal[
    "arbitrum", "avalanche_c_chain", "base", "celo", "ethereum",
    "optimism", "polygon", "solana", "stellar", "tron",
]
Stablecoin = Literal["usdc", "usdt", "dai", "pyusd", "eurc"]
VirtualAccountEventType = Literal[
    "funds_scheduled", "funds_received", "payment_submitted", "payment_processed",
    "in_review", "refund", "microdeposit", "account_update", "deactivation", "activation",
]

CUSTOMER_TYPES = {
    "individual": "CUSTOMER_TYPE_INDIVIDUAL",
    "business": "CUSTOMER_TYPE_BUSINESS",
}

WEBHOOK_EVENT_TYPES = (
    "WEBHOOK_EVENT_TYPE_CUSTOMER_CREATED",
    "WEBHOOK_EVENT_TYPE_CUSTOMER_UPDATED",
    "WEBHOOK_EVENT_TYPE_KYC_STATUS_CHANGED",
    "WEBHOOK_EVENT_TYPE_PAYMENT_CREATED",
    "WEBHOOK_EVENT_TYPE_PAYMENT_STATUS_CHANGED",
    "WEBHOOK_EVENT_TYPE_QUOTE_CREATED",
    "WEBHOOK_EVENT_TYPE_QUOTE_EXPIRED",
    "WEBHOOK_EVENT_TYPE_VA_DEPOSIT_RECEIVED",
    "WEBHOOK_EVENT_TYPE_VA_PAYOUT_COMPLETED",
    "WEBHOOK_EVENT_TYPE_VA_PAYOUT_FAILED",
    "WEBHOOK_EVENT_TYPE_ALL",
)


def compact(**fields: Any) -> dict[str, Any]:
    """Drop None values so omitted arguments never reach the wire."""
    return {key: value for key, value in fields.items() if value is not None}


class ToolInput(BaseModel):
    """Base for every tool's arguments.  Unknown arguments are an error."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class NoInput(ToolInput):
    pass


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------
class CreateCustomerInput(ToolInput):
    email: Email
    customer_type: CustomerType
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    middle_name: Optional[str] = None
    company_name: Optional[str] = None
    external_customer_id: Optional[str] = None
    phone: Optional[str] = None
    dob: Optional[DateString] = None
    nationality: Optional[str] = None
    entitlements: Optional[list[str]] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_postal_code: Optional[str] = None
    address_country: Optional[str] = None
    metadata: Optional[Metadata] = None

    def address(self) -> Optional[dict[str, Any]]:
        # The address block is sent only when a first line is given.
        if not self.address_line1:
            return None
        return compact(
            line1=self.address_line1,
            line2=self.address_line2,
            city=self.address_city or "",
            state=self.address_state,
            postalCode=self.address_postal_code,
            country=self.address_country or "",
        )

    def to_body(self, external_customer_id: str) -> dict[str, Any]:
        return compact(
            externalCustomerId=external_customer_id,
            customerType=CUSTOMER_TYPES[self.customer_type],
            email=self.email,
            firstName=self.first_name,
            lastName=self.last_name,
            middleName=self.middle_name,
            companyName=self.company_name,
            phone=self.phone,
            dob=self.dob,
            nationality=self.nationality,
            entitlements=self.entitlements,
            address=self.address(),
            metadata=self.metadata,
        )


class CustomerRef(ToolInput):
    customer_id: Identifier


class UpdateCustomerInput(ToolInput):
    customer_id: Identifier
    email: Optional[Email] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    entitlements: Optional[list[str]] = None

    def to_body(self) -> dict[str, Any]:
        return compact(
            email=self.email,
            phone=self.phone,
            firstName=self.first_name,
            lastName=self.last_name,
            entitlements=self.entitlements,
        )


class UpdateCustomerMetadataInput(ToolInput):
    customer_id: Identifier
    metadata: Metadata

    def to_body(self) -> dict[str, Any]:
        return {"metadata": dict(self.metadata)}


class VerificationLinkInput(ToolInput):
    customer_id: Identifier
    ttl_in_secs: Optional[PositiveInt] = None
    success_url: Optional[HttpUrl] = None
    reject_url: Optional[HttpUrl] = None

    def to_body(self) -> dict[str, Any]:
        redirect = None
        if self.success_url or self.reject_url:
            redirect = compact(successUrl=self.success_url, rejectUrl=self.reject_url)
        return compact(ttlInSecs=self.ttl_in_secs, redirect=redirect)


# -----------------------------------------------------------------------------
# Quotes
# -----------------------------------------------------------------------------
class CreateQuoteInput(ToolInput):
    from_currency: Literal["USDC", "USDT"]
    from_amount: Amount
    from_network: QuoteNetwork
    to_currency: NonEmpty
    to_country: NonEmpty
    payment_method_type: PaymentMethodType
    metadata: Optional[Metadata] = None

    def to_body(self) -> dict[str, Any]:
        return compact(
            **{
                "from": {
                    "currency": self.from_currency,
                    "amount": self.from_amount,
                    "network": self.from_network,
                },
                "to": {
                    "currency": self.to_currency,
                    "country": self.to_country,
                    "paymentMethodType": self.payment_method_type,
                },
            },
            metadata=self.metadata,
        )


class QuoteRef(ToolInput):
    quote_id: Identifier


# -----------------------------------------------------------------------------
# Transfers
# -----------------------------------------------------------------------------
class CreateTransferInput(ToolInput):
    customer_id: Identifier
    quote_id: Identifier
    account_holder_name: Optional[str] = None
    iban: Optional[str] = None
    account_number: Optional[str] = None
    bank_name: Optional[str] = None
    bank_country: Optional[str] = None
    bank_currency: Optional[str] = None
    swift_code: Optional[str] = None
    routing_number: Optional[str] = None
    sort_code: Optional[str] = None
    metadata: Optional[Metadata] = None

    def payment_method(self) -> Optional[dict[str, Any]]:
        if not self.account_holder_name:
            return None
        bank_codes = compact(
            swiftCode=self.swift_code,
            abaCode=self.routing_number,
            sortCode=self.sort_code,
        )
        return {
            "bankTransfer": compact(
                accountHolderName=self.account_holder_name,
                iban=self.iban,
                accountNumber=self.account_number,
                bankName=self.bank_name,
                bankCountry=self.bank_country,
                currency=self.bank_currency,
                bankCodes=bank_codes or None,
            ),
        }

    def to_body(self) -> dict[str, Any]:
        return compact(
            customerId=self.customer_id,
            quoteId=self.quote_id,
            paymentMethod=self.payment_method(),
            metadata=self.metadata,
        )


class TransferRef(ToolInput):
    transfer_id: Identifier


class ListTransfersInput(ToolInput):
    status: Optional[TransferStatus] = None
    type: Optional[TransferType] = None
    customer_id: Optional[Identifier] = None
    page_size: Optional[PositiveInt] = None
    page_token: Optional[str] = None

    def to_query(self) -> dict[str, Any]:
        return build_query(
            status=self.status,
            type=self.type,
            customerId=self.customer_id,
            pageSize=self.page_size,
            pageToken=self.page_token,
        )


# -----------------------------------------------------------------------------
# Virtual accounts
# -----------------------------------------------------------------------------
class CreateVirtualAccountInput(ToolInput):
    customer_id: Identifier
    source_currency: NonEmpty
    deposit_handling_mode: Optional[DepositHandlingMode] = None
    destination_address: Optional[str] = None
    destination_payment_rail: Optional[PaymentRail] = None
    destination_currency: Optional[Stablecoin] = None
    destination_memo: Optional[str] = None
    metadata: Optional[Metadata] = None

    def destination(self) -> Optional[dict[str, Any]]:
        # Only a complete destination (address + rail) is sent.
        if not (self.destination_address and self.destination_payment_rail):
            return None
        return compact(
            currency=self.destination_currency or "usdc",
            payment_rail=self.destination_payment_rail,
            address=self.destination_address,
            memo=self.destination_memo,
        )

    def to_body(self) -> dict[str, Any]:
        return compact(
            source={"currency": self.source_currency},
            deposit_handling_mode=self.deposit_handling_mode,
            destination=self.destination(),
            metadata=self.metadata,
        )


class ListVirtualAccountsInput(ToolInput):
    customer_id: Identifier
    status: Optional[VirtualAccountStatus] = None
    limit: Optional[PositiveInt] = None

    def to_query(self) -> dict[str, Any]:
        return build_query(status=self.status, limit=self.limit)


class ListAllVirtualAccountsInput(ToolInput):
    status: Optional[VirtualAccountStatus] = None
    limit: Optional[PositiveInt] = None

    def to_query(self) -> dict[str, Any]:
        return build_query(status=self.status, limit=self.limit)


class VirtualAccountRef(ToolInput):
    customer_id: Identifier
    virtual_account_id: Identifier


class UpdateVirtualAccountInput(VirtualAccountRef):
    deposit_handling_mode: DepositHandlingMode

    def to_body(self) -> dict[str, Any]:
        return {"deposit_handling_mode": self.deposit_handling_mode}


class VirtualAccountHistoryInput(VirtualAccountRef):
    limit: Optional[PositiveInt] = None
    event_type: Optional[VirtualAccountEventType] = None

    def to_query(self) -> dict[str, Any]:
        return build_query(limit=self.limit, event_type=self.event_type)


# -----------------------------------------------------------------------------
# API keys
# -----------------------------------------------------------------------------
class CreateApiKeyInput(ToolInput):
    name: NonEmpty
    metadata: Optional[Metadata] = None

    def to_body(self) -> dict[str, Any]:
        return compact(name=self.name, metadata=self.metadata)


class ListApiKeysInput(ToolInput):
    page_size: Optional[PositiveInt] = None
    page_token: Optional[str] = None

    def to_query(self) -> dict[str, Any]:
        return build_query(pageSize=self.page_size, pageToken=self.page_token)


class ApiKeyRef(ToolInput):
    api_key_id: Identifier


# -----------------------------------------------------------------------------
# Webhooks
# -----------------------------------------------------------------------------
class CreateWebhookInput(ToolInput):
    name: NonEmpty
    url: HttpUrl
    event_types: list[NonEmpty] = Field(min_length=1)
    secret: Optional[str] = None
    metadata: Optional[Metadata] = None

    def to_body(self) -> dict[str, Any]:
        return compact(
            name=self.name,
            url=self.url,
            eventTypes=list(self.event_types),
            secret=self.secret,
            metadata=self.metadata,
        )


class WebhookRef(ToolInput):
    webhook_id: Identifier
