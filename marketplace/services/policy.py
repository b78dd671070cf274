# marketplace/services/policy.py
"""
Who may do what to which row.

Every protected operation is described once in POLICY as the set of actor
types allowed to attempt it plus, per actor type, the attribute path on the
target row that must equal the actor's id. Routers never compare ids
themselves; they call ``enforce``.
"""
from dataclasses import dataclass, field
from typing import Any, Collection, FrozenSet, Mapping, Optional

from fastapi import HTTPException

CUSTOMER = "customer"
DEALER = "dealer"
PROVIDER = "provider"
ACTOR_TYPES: FrozenSet[str] = frozenset({CUSTOMER, DEALER, PROVIDER})


@dataclass(frozen=True)
class Actor:
    id: int
    type: str
    username: str = ""


@dataclass(frozen=True)
class Rule:
    allowed: FrozenSet[str]
    owner: Mapping[str, str] = field(default_factory=dict)
    message: str = "Access denied"


def authorize(actor: Actor, allowed_types: Optional[Collection[str]] = None,
              resource_owner_id: Optional[Any] = None) -> bool:
    if allowed_types is not None and actor.type not in allowed_types:
        return False
    # ids of different types never match ("1" vs 1)
    if resource_owner_id is not None and not (
        type(actor.id) is type(resource_owner_id) and actor.id == resource_owner_id
    ):
        return False
    return True


def _rule(allowed, owner=None, message="Access denied") -> Rule:
    return Rule(frozenset(allowed), dict(owner or {}), message)


_SELF_CUSTOMER = {CUSTOMER: "id"}
_SELF_DEALER = {DEALER: "id"}
_SELF_PROVIDER = {PROVIDER: "id"}
_ORDER_PARTIES = {CUSTOMER: "customer_id", DEALER: "dealer_id"}
_ITEM_PARTIES = {CUSTOMER: "order.customer_id", DEALER: "order.dealer_id"}
_PO_PARTIES = {DEALER: "dealer_id", PROVIDER: "provider_id"}

POLICY: Mapping[tuple, Rule] = {
    # accounts
    ("customer", "read"): _rule({CUSTOMER}, _SELF_CUSTOMER, "Access denied. You can only view your own profile."),
    ("customer", "update"): _rule({CUSTOMER}, _SELF_CUSTOMER, "Access denied. You can only update your own profile."),
    ("customer", "delete"): _rule({CUSTOMER}, _SELF_CUSTOMER, "Access denied. You can only delete your own account."),
    ("dealer", "read"): _rule({DEALER}, _SELF_DEALER, "Cannot access other dealer profiles"),
    ("dealer", "update"): _rule({DEALER}, _SELF_DEALER, "Cannot update other dealer profiles"),
    ("dealer", "delete"): _rule({DEALER}, _SELF_DEALER, "Cannot delete other dealer accounts"),
    ("provider", "read"): _rule(ACTOR_TYPES),
    ("provider", "update"): _rule({PROVIDER}, _SELF_PROVIDER, "Cannot update other provider profiles"),
    ("provider", "delete"): _rule({PROVIDER}, _SELF_PROVIDER, "Cannot delete other provider accounts"),
    ("provider", "read_purchase_orders"): _rule({PROVIDER}, _SELF_PROVIDER, "Cannot access other provider purchase orders"),

    # catalog
    ("substance", "read"): _rule(ACTOR_TYPES),
    ("substance", "create"): _rule({PROVIDER}),
    ("substance", "update"): _rule({PROVIDER}, {PROVIDER: "provider_id"}, "Cannot update substances from other providers"),
    ("substance", "delete"): _rule({PROVIDER}, {PROVIDER: "provider_id"}, "Cannot delete substances from other providers"),
    ("provider_transport", "read"): _rule(ACTOR_TYPES),
    ("provider_transport", "create"): _rule({PROVIDER}),
    ("provider_transport", "update"): _rule({PROVIDER}, {PROVIDER: "provider_id"}, "Cannot update other providers transport options"),
    ("provider_transport", "delete"): _rule({PROVIDER}, {PROVIDER: "provider_id"}, "Cannot delete other providers transport options"),
    ("inventory", "read"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot access inventory from other dealers"),
    ("inventory", "create"): _rule({DEALER}),
    ("inventory", "update"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot update inventory from other dealers"),
    ("inventory", "delete"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot delete inventory from other dealers"),

    # customer orders
    ("order", "read"): _rule({CUSTOMER, DEALER}, _ORDER_PARTIES, "Cannot view orders of other users"),
    ("order", "create"): _rule({CUSTOMER}),
    ("order", "update"): _rule({CUSTOMER, DEALER}, _ORDER_PARTIES, "Cannot update orders of other users"),
    ("order", "cancel"): _rule({CUSTOMER}, {CUSTOMER: "customer_id"}, "Cannot cancel other customer orders"),
    ("order", "delete"): _rule({CUSTOMER}, {CUSTOMER: "customer_id"}, "Cannot delete other customer orders"),
    ("order_item", "read"): _rule({CUSTOMER, DEALER}, _ITEM_PARTIES, "Cannot access order items of other users"),
    ("order_item", "read_order"): _rule({CUSTOMER, DEALER}, _ORDER_PARTIES, "Cannot access order items of other users"),
    # target is the parent order
    ("order_item", "create"): _rule({CUSTOMER}, {CUSTOMER: "customer_id"}, "Cannot add items to other customers orders"),
    ("order_item", "update"): _rule({CUSTOMER}, {CUSTOMER: "order.customer_id"}, "Cannot update other customers order items"),
    ("order_item", "delete"): _rule({CUSTOMER}, {CUSTOMER: "order.customer_id"}, "Cannot delete other customers order items"),
    ("shipment", "read"): _rule({CUSTOMER, DEALER}, _ITEM_PARTIES, "Cannot view shipments of other users"),
    # target is the order being shipped
    ("shipment", "create"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot create shipment for other dealer orders"),
    ("shipment", "update"): _rule({DEALER}, {DEALER: "order.dealer_id"}, "Cannot update shipments for other dealer orders"),
    ("shipment", "delete"): _rule({DEALER}, {DEALER: "order.dealer_id"}, "Cannot delete shipments for other dealer orders"),

    # dealer <-> provider
    ("purchase_order", "read"): _rule({DEALER, PROVIDER}, _PO_PARTIES, "Cannot view purchase orders of other users"),
    ("purchase_order", "create"): _rule({DEALER}),
    ("purchase_order", "update"): _rule({DEALER, PROVIDER}, _PO_PARTIES, "Cannot update purchase orders of other users"),
    ("purchase_order", "delete"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot delete other dealer purchase orders"),

    # images
    ("substance_image", "write"): _rule({PROVIDER}, {PROVIDER: "provider_id"}, "Cannot change images of other providers substances"),
    ("inventory_image", "write"): _rule({DEALER}, {DEALER: "dealer_id"}, "Cannot change images of other dealers inventory"),
    ("image", "read"): _rule(ACTOR_TYPES),
}


def rule_for(entity: str, operation: str) -> Rule:
    try:
        return POLICY[(entity, operation)]
    except KeyError:
        raise LookupError(f"no policy for {entity}.{operation}")


def owner_of(resource: Any, path: str) -> Any:
    value = resource
    for part in path.split("."):
        value = getattr(value, part)
    return value


def check_role(actor: Actor, entity: str, operation: str) -> None:
    if not authorize(actor, rule_for(entity, operation).allowed):
        raise HTTPException(status_code=403, detail="Access denied for this user type")


def enforce(actor: Actor, entity: str, operation: str, resource: Any = None) -> None:
    """Raise 403 unless ``actor`` may perform ``operation`` on ``resource``."""
    check_role(actor, entity, operation)
    rule = rule_for(entity, operation)
    path = rule.owner.get(actor.type)
    if resource is None or path is None:
        return
    if not authorize(actor, resource_owner_id=owner_of(resource, path)):
        raise HTTPException(status_code=403, detail=rule.message)
