# marketplace/services/shipments.py
from typing import Optional

from marketplace.models.order_model import Order

# shipment status -> order status; None covers a shipment created without a status
SHIPMENT_TO_ORDER_STATUS = {
    None: "processing",
    "preparing": "processing",
    "in_transit": "shipped",
    "delivered": "delivered",
    "failed": "cancelled",
}


def order_status_for(shipment_status: Optional[str]) -> str:
    return SHIPMENT_TO_ORDER_STATUS[shipment_status]


def propagate_shipment_status(shipment_status: Optional[str], order: Order) -> str:
    """Overwrite the order's status from its shipment. No transition checks, last write wins."""
    order.orderStatus = order_status_for(shipment_status)
    return order.orderStatus
