"""AA Split - Split shared restaurant bills and settle up with few transfers."""

__version__ = "0.1.0"

from .allocation import items_total, order_total, per_person_consumption
from .config import Settings, load_settings
from .editor import BillEditor
from .exceptions import AaSplitError, InvalidStateError, ReceiptParseError
from .models import (
    BalanceStatus,
    BillState,
    LineItem,
    Order,
    Participant,
    ReceiptCandidate,
    SettlementResult,
    Transfer,
)
from .settlement import compute_net_balances, plan_transfers, settle

__all__ = [
    "Settings",
    "load_settings",
    "BillEditor",
    "AaSplitError",
    "InvalidStateError",
    "ReceiptParseError",
    "BalanceStatus",
    "BillState",
    "LineItem",
    "Order",
    "Participant",
    "ReceiptCandidate",
    "SettlementResult",
    "Transfer",
    "items_total",
    "order_total",
    "per_person_consumption",
    "compute_net_balances",
    "plan_transfers",
    "settle",
]
