# =============================================================================
# core/models.py  —  Response Models (the "nouns" of the Stables API)
# =============================================================================
#
# These dataclasses mirror the resources the Stables API returns.  The
# server owns none of them: every instance is built from a live response
# and thrown away after the tool result is rendered.
#
# BEST-EFFORT CONTRACT:
#   The upstream API is versioned by someone else.  Every from_dict() below
#   treats missing or mistyped optional fields as absent (None / empty list)
#   instead of raising, and skips list entries that are not objects.  Only a
#   top-level body that is not a JSON object is an error (as_object).
#   Identifiers are read with a "" default so renderers never have to guard
#   against None ids.
#
# FIELD NAMES:
#   Python attributes are snake_case; the wire names stay whatever the API
#   uses (camelCase for customers/quotes/transfers/keys/webhooks, snake_case
#   for virtual accounts).  The mapping lives in from_dict() only.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional

from core.errors import StablesAPIError

NOT_STARTED = "NOT_STARTED"


def as_object(data: Any) -> dict:
    """Return data if it is a JSON object; anything else is a malformed response."""
    if not isinstance(data, dict):
        raise StablesAPIError(
            f"Malformed response from Stables API: expected a JSON object, got {type(data).__name__}"
        )
    return data


def _str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else str(value)


def _dict(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _list(data: dict, key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


def records(data: dict, key: str) -> list[dict]:
    """The object entries of data[key]; non-object entries are skipped."""
    return [item for item in _list(data, key) if isinstance(item, dict)]


def _float(data: dict, key: str) -> Optional[float]:
    try:
        return float(data[key])
    except (KeyError, TypeError, ValueError):
        return None


def _int(data: dict, key: str, default: Optional[int] = None) -> Optional[int]:
    try:
        return int(data[key])
    except (KeyError, TypeError, ValueError):
        return default


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------
@dataclass
class VerificationLevel:
    level: Optional[str]
    status: Optional[str]

    @classmethod
    def from_dict(cls, data: dict) -> "VerificationLevel":
        return cls(level=_str(data, "level"), status=_str(data, "status"))


@dataclass
class Entitlement:
    name: str
    status: Optional[str]

    @classmethod
    def from_dict(cls, data: dict) -> "Entitlement":
        return cls(name=data.get("name") or "", status=_str(data, "status"))


@dataclass
class Customer:
    """A KYC'd individual or business known to Stables."""

    customer_id: str
    external_customer_id: Optional[str] = None
    customer_type: Optional[str] = None     # CUSTOMER_TYPE_INDIVIDUAL / _BUSINESS
    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    verification_levels: list[VerificationLevel] = field(default_factory=list)
    entitlements: list[Entitlement] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def verification_status(self) -> str:
        """Status of the first verification level, or NOT_STARTED."""
        if self.verification_levels and self.verification_levels[0].status:
            return self.verification_levels[0].status
        return NOT_STARTED

    @property
    def is_verified(self) -> bool:
        return self.verification_status == "VERIFICATION_APPROVED"

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        data = as_object(data)
        return cls(
            customer_id=data.get("customerId") or "",
            external_customer_id=_str(data, "externalCustomerId"),
            customer_type=_str(data, "customerType"),
            email=_str(data, "email"),
            phone=_str(data, "phone"),
            first_name=_str(data, "firstName"),
            last_name=_str(data, "lastName"),
            company_name=_str(data, "companyName"),
            created_at=_str(data, "createdAt"),
            updated_at=_str(data, "updatedAt"),
            verification_levels=[VerificationLevel.from_dict(v) for v in records(data, "verificationLevels")],
            entitlements=[Entitlement.from_dict(e) for e in records(data, "entitlements")],
            metadata=_dict(data, "metadata"),
        )


@dataclass
class VerificationLink:
    customer_id: str
    kyc_link: str

    @classmethod
    def from_dict(cls, data: dict) -> "VerificationLink":
        data = as_object(data)
        return cls(customer_id=data.get("customerId") or "", kyc_link=data.get("kycLink") or "")


@dataclass
class MetadataUpdate:
    """Result of update_customer_metadata: the API answers with an empty body."""

    customer_id: str
    keys: list[str]


# -----------------------------------------------------------------------------
# Quotes
# -----------------------------------------------------------------------------
@dataclass
class CurrencyAmount:
    currency: str
    amount: str
    network: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["CurrencyAmount"]:
        if not isinstance(data, dict):
            return None
        return cls(
            currency=data.get("currency") or "",
            amount=str(data.get("amount") or ""),
            network=_str(data, "network"),
        )


@dataclass
class QuoteDestination:
    currency: str
    amount: str
    payment_method_type: Optional[str] = None    # SWIFT / LOCAL
    network: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteDestination":
        return cls(
            currency=data.get("currency") or "",
            amount=str(data.get("amount") or ""),
            payment_method_type=_str(data, "paymentMethodType"),
            network=_str(data, "network"),
        )


@dataclass
class FeeBreakdown:
    total_fee: Optional[CurrencyAmount] = None
    fx_fee: Optional[CurrencyAmount] = None
    platform_fee: Optional[CurrencyAmount] = None
    payment_method_fee: Optional[CurrencyAmount] = None
    network_fee: Optional[CurrencyAmount] = None
    integrator_fee: Optional[CurrencyAmount] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FeeBreakdown":
        return cls(
            total_fee=CurrencyAmount.from_dict(data.get("totalFee")),
            fx_fee=CurrencyAmount.from_dict(data.get("fxFee")),
            platform_fee=CurrencyAmount.from_dict(data.get("platformFee")),
            payment_method_fee=CurrencyAmount.from_dict(data.get("paymentMethodFee")),
            network_fee=CurrencyAmount.from_dict(data.get("networkFee")),
            integrator_fee=CurrencyAmount.from_dict(data.get("integratorFee")),
        )


@dataclass
class Quote:
    """An exchange-rate offer.  Immutable once created; status moves upstream only."""

    quote_id: str
    source: CurrencyAmount
    destination: QuoteDestination
    fees: FeeBreakdown
    exchange_rate: Optional[float] = None
    expires_at: Optional[str] = None
    created_at: Optional[str] = None
    status: Optional[str] = None        # QUOTE_STATUS_ACTIVE / _EXPIRED / _USED / _CANCELLED
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Quote":
        data = as_object(data)
        return cls(
            quote_id=data.get("quoteId") or "",
            source=CurrencyAmount.from_dict(_dict(data, "from")) or CurrencyAmount("", ""),
            destination=QuoteDestination.from_dict(_dict(data, "to")),
            fees=FeeBreakdown.from_dict(_dict(data, "fees")),
            exchange_rate=_float(data, "exchangeRate"),
            expires_at=_str(data, "expiresAt"),
            created_at=_str(data, "createdAt"),
            status=_str(data, "status"),
            metadata=_dict(data, "metadata"),
        )


# -----------------------------------------------------------------------------
# Transfers
# -----------------------------------------------------------------------------
@dataclass
class CollectionInstructions:
    """Where the customer must send crypto for an off-ramp transfer."""

    wallet_address: str
    currency: str
    network: str
    amount: str

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["CollectionInstructions"]:
        if not isinstance(data, dict):
            return None
        return cls(
            wallet_address=data.get("walletAddress") or "",
            currency=data.get("currency") or "",
            network=data.get("network") or "",
            amount=str(data.get("amount") or ""),
        )


@dataclass
class Transfer:
    id: str
    customer_id: Optional[str] = None
    quote_id: Optional[str] = None
    type: Optional[str] = None          # TRANSFER_TYPE_ONRAMP / _OFFRAMP
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    collection_instructions: Optional[CollectionInstructions] = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Transfer":
        data = as_object(data)
        return cls(
            id=data.get("id") or "",
            customer_id=_str(data, "customerId"),
            quote_id=_str(data, "quoteId"),
            type=_str(data, "type"),
            status=_str(data, "status"),
            created_at=_str(data, "createdAt"),
            updated_at=_str(data, "updatedAt"),
            collection_instructions=CollectionInstructions.from_dict(data.get("collectionInstructions")),
            metadata=_dict(data, "metadata"),
        )


@dataclass
class Page:
    """Pagination info forwarded verbatim; nothing walks pages automatically."""

    next_page_token: Optional[str] = None
    total: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Page":
        return cls(
            next_page_token=data.get("nextPageToken") or None,
            total=_int(data, "total"),
        )


@dataclass
class TransferPage:
    transfers: list[Transfer]
    page: Page

    @classmethod
    def from_dict(cls, data: dict) -> "TransferPage":
        data = as_object(data)
        return cls(
            transfers=[Transfer.from_dict(t) for t in records(data, "transfers")],
            page=Page.from_dict(_dict(data, "page")),
        )


# -----------------------------------------------------------------------------
# Virtual accounts  (snake_case on the wire)
# -----------------------------------------------------------------------------
@dataclass
class DepositInstructions:
    currency: str
    payment_rails: list[str] = field(default_factory=list)
    bank_name: Optional[str] = None
    bank_address: Optional[str] = None
    bank_beneficiary_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_routing_number: Optional[str] = None
    iban: Optional[str] = None
    bic: Optional[str] = None
    pix_key: Optional[str] = None
    clabe: Optional[str] = None
    account_holder_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DepositInstructions":
        return cls(
            currency=data.get("currency") or "",
            payment_rails=[str(r) for r in _list(data, "payment_rails")],
            bank_name=_str(data, "bank_name"),
            bank_address=_str(data, "bank_address"),
            bank_beneficiary_name=_str(data, "bank_beneficiary_name"),
            bank_account_number=_str(data, "bank_account_number"),
            bank_routing_number=_str(data, "bank_routing_number"),
            iban=_str(data, "iban"),
            bic=_str(data, "bic"),
            pix_key=_str(data, "pix_key"),
            clabe=_str(data, "clabe"),
            account_holder_name=_str(data, "account_holder_name"),
        )


@dataclass
class PayoutDestination:
    currency: str
    payment_rail: str
    address: str
    memo: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["PayoutDestination"]:
        if not isinstance(data, dict):
            return None
        return cls(
            currency=data.get("currency") or "",
            payment_rail=data.get("payment_rail") or "",
            address=data.get("address") or "",
            memo=_str(data, "memo"),
        )


@dataclass
class HeldBalance:
    amount: str
    currency: str

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["HeldBalance"]:
        if not isinstance(data, dict):
            return None
        return cls(amount=str(data.get("amount") or "0"), currency=data.get("currency") or "")


@dataclass
class DepositStats:
    total_deposit_count: int = 0
    total_deposit_amount: str = "0"
    last_deposit_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["DepositStats"]:
        if not isinstance(data, dict):
            return None
        return cls(
            total_deposit_count=_int(data, "total_deposit_count") or 0,
            total_deposit_amount=str(data.get("total_deposit_amount") or "0"),
            last_deposit_at=_str(data, "last_deposit_at"),
        )


@dataclass
class VirtualAccount:
    """A standing deposit account bound to one customer."""

    id: str
    status: Optional[str] = None                # activated / deactivated / pending / closed
    customer_id: Optional[str] = None
    deposit_handling_mode: Optional[str] = None  # auto_payout / hold / manual
    created_at: Optional[str] = None
    developer_fee_percent: Optional[str] = None
    deposit_instructions: DepositInstructions = field(default_factory=lambda: DepositInstructions(currency=""))
    destination: Optional[PayoutDestination] = None
    held_balance: Optional[HeldBalance] = None
    deposit_stats: Optional[DepositStats] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VirtualAccount":
        data = as_object(data)
        return cls(
            id=data.get("id") or "",
            status=_str(data, "status"),
            customer_id=_str(data, "customer_id"),
            deposit_handling_mode=_str(data, "deposit_handling_mode"),
            created_at=_str(data, "created_at"),
            developer_fee_percent=_str(data, "developer_fee_percent"),
            deposit_instructions=DepositInstructions.from_dict(_dict(data, "source_deposit_instructions")),
            destination=PayoutDestination.from_dict(data.get("destination")),
            held_balance=HeldBalance.from_dict(data.get("held_balance")),
            deposit_stats=DepositStats.from_dict(data.get("deposit_stats")),
        )


@dataclass
class VirtualAccountList:
    accounts: list[VirtualAccount]
    count: int
    customer_id: Optional[str] = None   # None for the tenant-wide listing

    @classmethod
    def from_dict(cls, data: dict, customer_id: Optional[str] = None) -> "VirtualAccountList":
        data = as_object(data)
        accounts = [VirtualAccount.from_dict(a) for a in records(data, "data")]
        return cls(
            accounts=accounts,
            count=_int(data, "count", len(accounts)),
            customer_id=customer_id,
        )


@dataclass
class VirtualAccountEvent:
    id: str
    type: str
    amount: Optional[str] = None
    currency: Optional[str] = None
    deposit_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VirtualAccountEvent":
        return cls(
            id=data.get("id") or "",
            type=data.get("type") or "",
            amount=_str(data, "amount"),
            currency=_str(data, "currency"),
            deposit_id=_str(data, "deposit_id"),
            created_at=_str(data, "created_at"),
        )


@dataclass
class VirtualAccountHistory:
    virtual_account_id: str
    events: list[VirtualAccountEvent]
    count: int

    @classmethod
    def from_dict(cls, data: dict, virtual_account_id: str) -> "VirtualAccountHistory":
        data = as_object(data)
        events = [VirtualAccountEvent.from_dict(e) for e in records(data, "data")]
        return cls(
            virtual_account_id=virtual_account_id,
            events=events,
            count=_int(data, "count", len(events)),
        )


# -----------------------------------------------------------------------------
# API keys
# -----------------------------------------------------------------------------
@dataclass
class ApiKey:
    api_key_id: str
    name: str = ""
    prefix: str = ""
    active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_used_at: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ApiKey":
        data = as_object(data)
        return cls(
            # Older responses use "id" instead of "apiKeyId".
            api_key_id=data.get("apiKeyId") or data.get("id") or "",
            name=data.get("name") or "",
            prefix=data.get("prefix") or "",
            active=data.get("active") is not False,
            created_at=_str(data, "createdAt"),
            updated_at=_str(data, "updatedAt"),
            last_used_at=_str(data, "lastUsedAt"),
            metadata=_dict(data, "metadata"),
        )


@dataclass
class CreatedApiKey:
    """A new key plus its secret.  The secret is returned once and never again."""

    api_key: ApiKey
    plaintext_key: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: dict) -> "CreatedApiKey":
        data = as_object(data)
        return cls(
            api_key=ApiKey.from_dict(_dict(data, "apiKey")),
            plaintext_key=data.get("plaintextKey") or "",
        )


@dataclass
class ApiKeyList:
    api_keys: list[ApiKey]
    next_page_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ApiKeyList":
        data = as_object(data)
        return cls(
            api_keys=[ApiKey.from_dict(k) for k in records(data, "apiKeys")],
            next_page_token=data.get("nextPageToken") or None,
        )


@dataclass
class Revocation:
    """Acknowledgement for DELETE-style calls, which return an empty body."""

    resource_id: str


# -----------------------------------------------------------------------------
# Webhooks
# -----------------------------------------------------------------------------
@dataclass
class WebhookSubscription:
    subscription_id: str
    name: str = ""
    url: str = ""
    event_types: list[str] = field(default_factory=list)
    active: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    has_secret: bool = False    # set locally from the request; the API never echoes it

    @classmethod
    def from_dict(cls, data: dict, has_secret: bool = False) -> "WebhookSubscription":
        data = as_object(data)
        return cls(
            subscription_id=data.get("subscriptionId") or "",
            name=data.get("name") or "",
            url=data.get("url") or "",
            event_types=[str(e) for e in _list(data, "eventTypes")],
            active=bool(data.get("active")),
            created_at=_str(data, "createdAt"),
            updated_at=_str(data, "updatedAt"),
            has_secret=has_secret,
        )


def unwrap(data: Any, key: str) -> dict:
    """Return data[key] when the API wraps a resource, else data itself."""
    data = as_object(data)
    if isinstance(data.get(key), dict):
        return data[key]
    return data
