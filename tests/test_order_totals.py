from decimal import Decimal

from marketplace.models import Customer, Dealer, Order, OrderItem, Provider, Substance
from marketplace.services.order_totals import (
    line_subtotal, purchase_order_total, recompute_order_total, sum_subtotals, to_money,
)


def test_line_subtotal():
    assert line_subtotal(2, "25.50") == Decimal("51.00")
    assert line_subtotal(4, Decimal("25.50")) == Decimal("102.00")
    assert line_subtotal(3, 0.1) == Decimal("0.30")


def test_rounding_is_half_up():
    assert to_money("0.005") == Decimal("0.01")
    assert to_money("2.675") == Decimal("2.68")
    assert line_subtotal(1, "10.125") == Decimal("10.13")


def test_sum_subtotals():
    assert sum_subtotals([]) == Decimal("0.00")
    assert sum_subtotals(["51.00", Decimal("10.10"), 0.2]) == Decimal("61.30")


def test_purchase_order_total():
    assert purchase_order_total(10, "25.50", "50.00") == Decimal("305.00")
    assert purchase_order_total(3, "9.99") == Decimal("29.97")


def _order(db):
    customer = Customer(username="c", email="c@example.com", password="x")
    dealer = Dealer(username="d", email="d@example.com", password="x")
    provider = Provider(username="p", email="p@example.com", password="x", businessName="P")
    db.add_all([customer, dealer, provider])
    db.flush()
    substance = Substance(provider_id=provider.id, substanceName="Caffeine")
    order = Order(customer_id=customer.id, dealer_id=dealer.id)
    db.add_all([substance, order])
    db.flush()
    return order, substance


def test_recompute_order_total(db_session):
    order, substance = _order(db_session)
    for qty, price in ((2, "25.50"), (1, "10.10")):
        db_session.add(OrderItem(order_id=order.id, substance_id=substance.id, quantity=qty,
                                 unitPrice=Decimal(price), subTotal=line_subtotal(qty, price)))

    assert recompute_order_total(db_session, order.id) == Decimal("61.10")
    db_session.commit()
    assert db_session.get(Order, order.id).totalAmount == Decimal("61.10")


def test_recompute_without_items_is_zero(db_session):
    order, _ = _order(db_session)
    order.totalAmount = Decimal("99.00")

    assert recompute_order_total(db_session, order.id) == Decimal("0.00")
    assert order.totalAmount == Decimal("0.00")
