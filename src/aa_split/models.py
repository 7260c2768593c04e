"""Pydantic domain models for AA Split."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# Bill Models
# ============================================================================


class Participant(BaseModel):
    """A person taking part in the bill. Identity is the id."""

    id: str
    name: str


class LineItem(BaseModel):
    """A single priced entry on an order.

    An empty ``assigned_to`` means nobody in particular ordered it, so the
    price is spread evenly over the whole roster.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: Decimal  # negative for refunds
    assigned_to: list[str] = Field(default_factory=list, alias="assignedTo")

    @field_validator("assigned_to")
    @classmethod
    def _dedupe_assignment(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class Order(BaseModel):
    """One receipt with its own items, payer and adjustment.

    ``tax`` is the signed difference between the declared grand total and
    the summed item prices: positive for service charge or rounding,
    negative for a discount.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    items: list[LineItem] = Field(default_factory=list)
    tax: Decimal = Decimal("0")
    payer_id: str = Field(alias="payerId")
    timestamp: datetime = Field(default_factory=datetime.now)


class BillState(BaseModel):
    """All orders and participants of a shared bill."""

    orders: list[Order] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)

    def get_participant(self, participant_id: str) -> Participant | None:
        """Find a participant by id."""
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def participant_name(self, participant_id: str) -> str:
        """Display name for a participant id, falling back to the id."""
        participant = self.get_participant(participant_id)
        return participant.name if participant else participant_id


# ============================================================================
# Ingestion Models
# ============================================================================


class ReceiptCandidate(BaseModel):
    """An item recognised on a receipt, before it joins an order."""

    name: str
    price: Decimal


# ============================================================================
# Settlement Models
# ============================================================================


class BalanceStatus(StrEnum):
    """Where a participant stands once all orders are netted."""

    RECEIVER = "receiver"
    DEBTOR = "debtor"
    SETTLED = "settled"


class Transfer(BaseModel):
    """A payment from a debtor to a creditor."""

    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: Decimal


class SettlementResult(BaseModel):
    """Net balances and the transfers that settle them.

    Balances are keyed by participant id in roster order: positive means
    the participant is owed money, negative means they owe.
    """

    balances: dict[str, Decimal]
    transfers: list[Transfer] = Field(default_factory=list)
    total_bill: Decimal = Decimal("0")
