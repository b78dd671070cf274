# marketplace/models/__init__.py
from .user_model import Customer, Dealer, Provider
from .substance_model import Substance
from .provider_transport_model import ProviderTransport
from .inventory_model import Inventory
from .order_model import Order
from .order_item_model import OrderItem
from .purchase_order_model import PurchaseOrder
from .shipment_model import Shipment
