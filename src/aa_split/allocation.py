"""Per-order allocation of item prices to participants."""

from collections.abc import Sequence
from decimal import Decimal

from .exceptions import InvalidStateError
from .models import BillState, Order, Participant


def items_total(order: Order) -> Decimal:
    """Sum of item prices on an order, before tax or adjustment."""
    return sum((item.price for item in order.items), Decimal("0"))


def order_total(order: Order) -> Decimal:
    """Final amount of an order: items plus the signed adjustment."""
    return items_total(order) + order.tax


def per_person_consumption(
    order: Order, participants: Sequence[Participant]
) -> dict[str, Decimal]:
    """
    Compute what each participant consumed on an order, before tax.

    Assigned items are split evenly among their assignees. Unassigned items
    are split evenly across the whole roster, not only across the people
    who appear elsewhere on the order.

    Args:
        order: The order to allocate
        participants: The full roster

    Returns:
        Mapping of participant id to consumed amount, in roster order

    Raises:
        InvalidStateError: If the roster is empty or an item is assigned to
            an id outside the roster
    """
    if not participants:
        raise InvalidStateError(
            f"Cannot allocate order {order.id}: there are no participants"
        )

    consumption = {p.id: Decimal("0") for p in participants}
    roster_size = len(participants)

    for item in order.items:
        if item.assigned_to:
            share = item.price / len(item.assigned_to)
            for participant_id in item.assigned_to:
                if participant_id not in consumption:
                    raise InvalidStateError(
                        f"Item '{item.name}' ({item.id}) on order {order.id} is "
                        f"assigned to unknown participant {participant_id}"
                    )
                consumption[participant_id] += share
        else:
            share = item.price / roster_size
            for participant_id in consumption:
                consumption[participant_id] += share

    return consumption


def validate_bill(bill: BillState) -> None:
    """
    Check that a bill can be settled.

    Raises:
        InvalidStateError: On an empty roster, duplicate participant ids, or
            a payer or assignment that references no participant
    """
    if not bill.participants:
        raise InvalidStateError("Bill has no participants")

    roster: set[str] = set()
    for participant in bill.participants:
        if participant.id in roster:
            raise InvalidStateError(f"Duplicate participant id {participant.id}")
        roster.add(participant.id)

    for order in bill.orders:
        if order.payer_id not in roster:
            raise InvalidStateError(
                f"Order {order.id} is paid by unknown participant {order.payer_id}"
            )
        for item in order.items:
            unknown = [pid for pid in item.assigned_to if pid not in roster]
            if unknown:
                raise InvalidStateError(
                    f"Item '{item.name}' ({item.id}) on order {order.id} is "
                    f"assigned to unknown participant(s): {', '.join(unknown)}"
                )
