"""Settlement engine: net balances and the transfers that clear them."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .allocation import items_total, order_total, per_person_consumption, validate_bill
from .models import BalanceStatus, BillState, SettlementResult, Transfer

logger = logging.getLogger(__name__)

# Used for every settled/debtor/creditor/negligible-transfer check
SETTLED_TOLERANCE = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """
    Round an amount to 2 decimal places for display.
    Uses ROUND_HALF_UP for consistency.
    """
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def classify_balance(amount: Decimal) -> BalanceStatus:
    """Classify a net balance as receiver, debtor or settled."""
    if amount > SETTLED_TOLERANCE:
        return BalanceStatus.RECEIVER
    if amount < -SETTLED_TOLERANCE:
        return BalanceStatus.DEBTOR
    return BalanceStatus.SETTLED


def compute_net_balances(bill: BillState) -> dict[str, Decimal]:
    """
    Compute each participant's net balance across all orders.

    Steps, per order:
    1. Allocate item prices to consumers (see per_person_consumption)
    2. Scale each consumer's share by final_total / items_total so the
       adjustment is carried in proportion to consumption
    3. If the items total is not positive there is nothing to scale
       against, so the final total is split evenly over the roster
    4. Debit every participant their share, credit the payer the full
       final total

    Args:
        bill: Snapshot of the bill; it is not modified

    Returns:
        Mapping of participant id to net balance, in roster order.
        Positive means owed money, negative means owes money.

    Raises:
        InvalidStateError: If the bill has no participants or references
            unknown participant ids
    """
    validate_bill(bill)

    participants = bill.participants
    roster_size = len(participants)
    balances = {p.id: Decimal("0") for p in participants}

    for order in bill.orders:
        order_items_total = items_total(order)
        order_final_total = order_items_total + order.tax
        consumption = per_person_consumption(order, participants)

        if order_items_total > 0:
            ratio = order_final_total / order_items_total
            should_pay = {pid: amount * ratio for pid, amount in consumption.items()}
        else:
            even_share = order_final_total / roster_size
            should_pay = {pid: even_share for pid in consumption}

        for participant_id, share in should_pay.items():
            balances[participant_id] -= share
        balances[order.payer_id] += order_final_total

        logger.debug(
            f"Order {order.id}: items {order_items_total}, final {order_final_total}, "
            f"paid by {order.payer_id}"
        )

    return balances


@dataclass
class _Position:
    participant_id: str
    remaining: Decimal


def plan_transfers(balances: Mapping[str, Decimal]) -> list[Transfer]:
    """
    Derive transfers that bring every balance within tolerance of zero.

    Largest debtor pays largest creditor until one of them is cleared, then
    the cursor moves on. This keeps the number of transfers low under a
    largest-first greedy heuristic; it is not a proven minimum for every
    set of balances.

    Args:
        balances: Participant id to net balance (positive = owed money)

    Returns:
        Ordered transfers; empty if everyone is already settled
    """
    debtors = [
        _Position(pid, -amount)
        for pid, amount in balances.items()
        if amount < -SETTLED_TOLERANCE
    ]
    creditors = [
        _Position(pid, amount)
        for pid, amount in balances.items()
        if amount > SETTLED_TOLERANCE
    ]

    # Stable sorts: ties keep roster order
    debtors.sort(key=lambda p: p.remaining, reverse=True)
    creditors.sort(key=lambda p: p.remaining, reverse=True)

    transfers: list[Transfer] = []
    i = 0
    j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor.remaining, creditor.remaining)
        if amount > SETTLED_TOLERANCE:
            transfers.append(
                Transfer(
                    from_id=debtor.participant_id,
                    to_id=creditor.participant_id,
                    amount=amount,
                )
            )

        debtor.remaining -= amount
        creditor.remaining -= amount

        if debtor.remaining < SETTLED_TOLERANCE:
            i += 1
        if creditor.remaining < SETTLED_TOLERANCE:
            j += 1

    return transfers


def settle(bill: BillState) -> SettlementResult:
    """
    Settle a bill: net balances, transfer plan and the overall total.

    This is a pure function; calling it twice on the same bill gives the
    same result.
    """
    balances = compute_net_balances(bill)
    transfers = plan_transfers(balances)
    total_bill = sum((order_total(order) for order in bill.orders), Decimal("0"))

    logger.info(
        f"Settled {len(bill.orders)} orders across {len(bill.participants)} "
        f"participants: total {to_cents(total_bill)}, {len(transfers)} transfers"
    )

    return SettlementResult(
        balances=balances,
        transfers=transfers,
        total_bill=total_bill,
    )
