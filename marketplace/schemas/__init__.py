# marketplace/schemas/__init__.py

# accounts
from .users import (
    CustomerRegister, DealerRegister, ProviderRegister, LoginPayload, LoginResponse,
    CustomerUpdate, DealerUpdate, ProviderUpdate, CustomerOut, DealerOut, ProviderOut, UserType,
)

# catalog
from .substances import SubstanceCreate, SubstanceUpdate, SubstanceOut
from .provider_transports import TransportCreate, TransportUpdate, TransportOut
from .inventory import InventoryCreate, InventoryUpdate, InventoryOut

# orders
from .orders import OrderCreate, OrderUpdate, OrderOut, OrderItemIn, OrderStatus, PaymentStatus
from .order_items import OrderItemCreate, OrderItemUpdate, OrderItemOut
from .purchase_orders import PurchaseOrderCreate, PurchaseOrderUpdate, PurchaseOrderOut, PurchaseOrderStatus
from .shipments import ShipmentCreate, ShipmentUpdate, ShipmentOut, ShipmentStatus

__all__ = [
    # accounts
    "CustomerRegister", "DealerRegister", "ProviderRegister", "LoginPayload", "LoginResponse",
    "CustomerUpdate", "DealerUpdate", "ProviderUpdate", "CustomerOut", "DealerOut", "ProviderOut", "UserType",
    # catalog
    "SubstanceCreate", "SubstanceUpdate", "SubstanceOut",
    "TransportCreate", "TransportUpdate", "TransportOut",
    "InventoryCreate", "InventoryUpdate", "InventoryOut",
    # orders
    "OrderCreate", "OrderUpdate", "OrderOut", "OrderItemIn", "OrderStatus", "PaymentStatus",
    "OrderItemCreate", "OrderItemUpdate", "OrderItemOut",
    "PurchaseOrderCreate", "PurchaseOrderUpdate", "PurchaseOrderOut", "PurchaseOrderStatus",
    "ShipmentCreate", "ShipmentUpdate", "ShipmentOut", "ShipmentStatus",
]
