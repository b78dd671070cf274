# marketplace/database/demo_data.py
"""Demo data for a fresh marketplace database: python -m marketplace.database.demo_data"""

import logging

from marketplace.database.session import Base, engine, SessionLocal
from marketplace.models import (
    Customer, Dealer, Provider, Substance, ProviderTransport, Inventory, Order, OrderItem,
)
from marketplace.services.auth_service import hash_password
from marketplace.services.order_totals import line_subtotal, recompute_order_total, to_money

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

CUSTOMERS = [
    ("john_doe", "john@example.com", "12 Main St, Springfield"),
    ("jane_smith", "jane@example.com", "48 Oak Ave, Riverside"),
    ("bob_wilson", "bob@example.com", "7 Pine Rd, Lakeside"),
]

DEALERS = [
    ("mega_dealer", "sales@megadealer.com", "Warehouse A - Downtown Distribution Center"),
    ("prime_supplier", "info@primesupplier.com", "Warehouse B - North Industrial Park"),
]

PROVIDERS = [
    ("global_imports", "contact@globalimports.com", "Global Imports LLC"),
    ("organic_sources", "hello@organicsources.com", "Organic Sources & Co."),
]

# provider index -> substances
SUBSTANCES = {
    0: [
        ("Caffeine Powder", "Stimulants", "Pure caffeine powder, pharmaceutical grade, 99.9% purity"),
        ("Vitamin C (Ascorbic Acid)", "Vitamins", "High-quality vitamin C powder, buffered formula"),
        ("Creatine Monohydrate", "Supplements", "Micronized creatine monohydrate for better absorption"),
    ],
    1: [
        ("Organic Matcha Powder", "Superfoods", "Ceremonial grade organic matcha from Japan"),
        ("Hemp Protein Powder", "Supplements", "Organic hemp protein, complete amino acid profile"),
    ],
}

TRANSPORTS = {
    0: [("Air Freight Express", "500.00", "15.50"), ("Sea Freight Standard", "200.00", "5.00")],
    1: [("Ground Delivery", "100.00", "3.50")],
}


def create_demo_data():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(Customer).first():
            logger.info("Demo data already present")
            return

        password = hash_password(DEMO_PASSWORD)
        customers = [Customer(username=u, email=e, password=password, address=a) for u, e, a in CUSTOMERS]
        dealers = [Dealer(username=u, email=e, password=password, warehouse=w, rating=to_money("4.5"))
                   for u, e, w in DEALERS]
        providers = [Provider(username=u, email=e, password=password, businessName=b) for u, e, b in PROVIDERS]
        db.add_all(customers + dealers + providers)
        db.flush()

        substances = []
        for idx, rows in SUBSTANCES.items():
            for name, category, description in rows:
                substances.append(Substance(provider_id=providers[idx].id, substanceName=name,
                                            category=category, description=description))
        for idx, rows in TRANSPORTS.items():
            for method, cost, per_kg in rows:
                db.add(ProviderTransport(provider_id=providers[idx].id, transportMethod=method,
                                         transportCost=to_money(cost), costPerKG=to_money(per_kg)))
        db.add_all(substances)
        db.flush()

        for dealer in dealers:
            for s in substances:
                db.add(Inventory(dealer_id=dealer.id, substance_id=s.id, quantityAvailable=100,
                                 warehouse=dealer.warehouse))

        order = Order(customer_id=customers[0].id, dealer_id=dealers[0].id,
                      deliveryAddress=customers[0].address, paymentMethod="credit_card")
        db.add(order)
        db.flush()
        for s, qty, price in ((substances[0], 2, "25.50"), (substances[3], 1, "42.00")):
            db.add(OrderItem(order_id=order.id, substance_id=s.id, quantity=qty,
                             unitPrice=to_money(price), subTotal=line_subtotal(qty, price)))
        recompute_order_total(db, order.id)

        db.commit()
        logger.info(f"Demo data created: {len(customers)} customers, {len(dealers)} dealers, "
                    f"{len(providers)} providers, {len(substances)} substances")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating demo data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_demo_data()
