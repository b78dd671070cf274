# marketplace/gateway/gateway_router.py
from fastapi import APIRouter

# accounts
from marketplace.routers.auth_router import router as auth_router
from marketplace.routers.customers_router import router as customers_router
from marketplace.routers.dealers_router import router as dealers_router
from marketplace.routers.providers_router import router as providers_router

# catalog
from marketplace.routers.substances_router import router as substances_router
from marketplace.routers.provider_transports_router import router as provider_transports_router
from marketplace.routers.inventory_router import router as inventory_router

# ordering
from marketplace.routers.orders_router import router as orders_router
from marketplace.routers.order_items_router import router as order_items_router
from marketplace.routers.purchase_orders_router import router as purchase_orders_router
from marketplace.routers.shipments_router import router as shipments_router

# files
from marketplace.routers.images_router import router as images_router

gateway_router = APIRouter()

gateway_router.include_router(auth_router)                  # /api/auth/...
gateway_router.include_router(customers_router)             # /api/customers/...
gateway_router.include_router(dealers_router)               # /api/dealers/...
gateway_router.include_router(providers_router)             # /api/providers/...

gateway_router.include_router(substances_router)            # /api/substances/...
gateway_router.include_router(provider_transports_router)   # /api/provider-transports/...
gateway_router.include_router(inventory_router)             # /api/inventory/...

gateway_router.include_router(orders_router)                # /api/orders/...
gateway_router.include_router(order_items_router)           # /api/order-items/...
gateway_router.include_router(purchase_orders_router)       # /api/purchase-orders/...
gateway_router.include_router(shipments_router)             # /api/shipments/...

gateway_router.include_router(images_router)                # /api/images/...
