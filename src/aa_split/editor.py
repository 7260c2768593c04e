"""Editor that owns the mutable working copy of a bill.

The settlement engine only ever sees snapshots taken from here, so edits
made after a settlement never leak into a result already computed.
"""

import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal

from .allocation import items_total
from .config import Settings
from .exceptions import InvalidStateError
from .models import (
    BillState,
    LineItem,
    Order,
    Participant,
    ReceiptCandidate,
    SettlementResult,
)
from .settlement import settle

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def random_id() -> str:
    """Generate a random UUID4 string."""
    return str(uuid.uuid4())


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert a user-entered amount to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def default_roster(names: Iterable[str]) -> list[Participant]:
    """Build the starting roster, numbering ids from 1."""
    return [Participant(id=str(i), name=name) for i, name in enumerate(names, 1)]


class BillEditor:
    """Mutable bill workspace: orders, items, assignments and roster."""

    def __init__(
        self,
        settings: Settings | None = None,
        id_factory: IdFactory | None = None,
    ):
        """Initialize the editor with the default roster and no orders."""
        self.settings = settings or Settings()
        self.new_id = id_factory or random_id
        self.bill = BillState(
            participants=default_roster(self.settings.default_participants)
        )

    # ========================================================================
    # Lookups
    # ========================================================================

    def get_order(self, order_id: str) -> Order:
        """Find an order by id."""
        for order in self.bill.orders:
            if order.id == order_id:
                return order
        raise InvalidStateError(f"Unknown order {order_id}")

    def get_item(self, order_id: str, item_id: str) -> LineItem:
        """Find an item on an order by id."""
        for item in self.get_order(order_id).items:
            if item.id == item_id:
                return item
        raise InvalidStateError(f"Unknown item {item_id} on order {order_id}")

    def get_participant(self, participant_id: str) -> Participant:
        """Find a participant by id."""
        participant = self.bill.get_participant(participant_id)
        if participant is None:
            raise InvalidStateError(f"Unknown participant {participant_id}")
        return participant

    def _roster_ids(self) -> list[str]:
        return [p.id for p in self.bill.participants]

    # ========================================================================
    # Orders
    # ========================================================================

    def add_order(self, candidates: Iterable[ReceiptCandidate] = ()) -> Order:
        """
        Create an order from recognised (or hand-entered) items.

        Every item starts assigned to the whole current roster, the first
        participant is the payer and there is no adjustment.
        """
        if not self.bill.participants:
            raise InvalidStateError("Cannot add an order without participants")

        order = Order(
            id=self.new_id(),
            items=[
                LineItem(
                    id=self.new_id(),
                    name=candidate.name,
                    price=candidate.price,
                    assigned_to=self._roster_ids(),
                )
                for candidate in candidates
            ],
            tax=Decimal("0"),
            payer_id=self.bill.participants[0].id,
            timestamp=datetime.now(),
        )
        self.bill.orders.append(order)

        logger.debug(f"Added order {order.id} with {len(order.items)} items")
        return order

    def delete_order(self, order_id: str) -> None:
        """Delete an order. Deleting the last one resets the whole bill."""
        order = self.get_order(order_id)
        if len(self.bill.orders) <= 1:
            logger.info("Deleted the last order, resetting bill")
            self.reset()
            return

        self.bill.orders.remove(order)
        logger.debug(f"Deleted order {order_id}")

    def reset(self) -> None:
        """Drop all orders and restore the default roster."""
        self.bill = BillState(
            participants=default_roster(self.settings.default_participants)
        )

    def set_payer(self, order_id: str, participant_id: str) -> None:
        """Change who paid for an order."""
        self.get_participant(participant_id)
        self.get_order(order_id).payer_id = participant_id

    def set_declared_total(
        self, order_id: str, declared_total: Decimal | int | float | str
    ) -> None:
        """Record the receipt's grand total as an adjustment on the items."""
        order = self.get_order(order_id)
        order.tax = to_money(declared_total) - items_total(order)
        logger.debug(f"Order {order_id} adjustment set to {order.tax}")

    # ========================================================================
    # Items
    # ========================================================================

    def add_item(
        self,
        order_id: str,
        name: str | None = None,
        price: Decimal | int | float | str = Decimal("0"),
    ) -> LineItem:
        """Append an item assigned to the whole current roster."""
        order = self.get_order(order_id)
        item = LineItem(
            id=self.new_id(),
            name=name or self.settings.default_item_name,
            price=to_money(price),
            assigned_to=self._roster_ids(),
        )
        order.items.append(item)
        return item

    def update_item(
        self,
        order_id: str,
        item_id: str,
        name: str | None = None,
        price: Decimal | int | float | str | None = None,
    ) -> LineItem:
        """Rename or reprice an item; None leaves a field unchanged."""
        item = self.get_item(order_id, item_id)
        if name is not None:
            item.name = name
        if price is not None:
            item.price = to_money(price)
        return item

    def remove_item(self, order_id: str, item_id: str) -> None:
        """Delete an item from an order."""
        order = self.get_order(order_id)
        order.items.remove(self.get_item(order_id, item_id))

    def toggle_assignment(
        self, order_id: str, item_id: str, participant_id: str
    ) -> LineItem:
        """Add or remove one participant from an item's assignment."""
        self.get_participant(participant_id)
        item = self.get_item(order_id, item_id)
        if participant_id in item.assigned_to:
            item.assigned_to = [p for p in item.assigned_to if p != participant_id]
        else:
            item.assigned_to = [*item.assigned_to, participant_id]
        return item

    def toggle_all(self, order_id: str, item_id: str) -> LineItem:
        """Assign everyone, or clear the assignment if everyone already is."""
        item = self.get_item(order_id, item_id)
        roster = self._roster_ids()
        if all(pid in item.assigned_to for pid in roster):
            item.assigned_to = []
        else:
            item.assigned_to = roster
        return item

    # ========================================================================
    # Participants
    # ========================================================================

    def add_participant(self, name: str | None = None) -> Participant:
        """Add a participant, named "Friend N" unless a name is given."""
        participant = Participant(
            id=self.new_id(),
            name=name or f"Friend {len(self.bill.participants)}",
        )
        self.bill.participants.append(participant)
        logger.debug(f"Added participant {participant.name} ({participant.id})")
        return participant

    def rename_participant(self, participant_id: str, name: str) -> Participant:
        """Change a participant's display name."""
        participant = self.get_participant(participant_id)
        participant.name = name
        return participant

    def remove_participant(self, participant_id: str) -> None:
        """
        Remove a participant who is not referenced anywhere.

        Raises:
            InvalidStateError: If they pay for an order, are assigned to an
                item, or are the last participant
        """
        participant = self.get_participant(participant_id)

        if len(self.bill.participants) <= 1:
            raise InvalidStateError("Cannot remove the last participant")

        for order in self.bill.orders:
            if order.payer_id == participant_id:
                raise InvalidStateError(
                    f"{participant.name} paid for order {order.id}; "
                    f"change the payer first"
                )
            for item in order.items:
                if participant_id in item.assigned_to:
                    raise InvalidStateError(
                        f"{participant.name} is assigned to '{item.name}' on "
                        f"order {order.id}; unassign them first"
                    )

        self.bill.participants.remove(participant)
        logger.debug(f"Removed participant {participant.name} ({participant_id})")

    # ========================================================================
    # Settlement
    # ========================================================================

    def snapshot(self) -> BillState:
        """Deep copy of the current bill, safe to hand to the engine."""
        return self.bill.model_copy(deep=True)

    def settle(self) -> SettlementResult:
        """Settle a snapshot of the current bill."""
        return settle(self.snapshot())
