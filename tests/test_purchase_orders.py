import pytest


@pytest.fixture
def transport(provider):
    r = provider.post("/api/provider-transports/", json={
        "transportMethod": "Ground Delivery", "transportCost": 50.00, "costPerKG": 3.50,
    })
    assert r.status_code == 201, r.text
    return r.json()["transport"]


@pytest.fixture
def purchase_order(dealer, provider, substance, transport):
    r = dealer.post("/api/purchase-orders/", json={
        "provider_id": provider.user_id,
        "substance_id": substance["id"],
        "providerTransport_id": transport["id"],
        "quantityOrdered": 10,
        "unitCost": 25.50,
    })
    assert r.status_code == 201, r.text
    return r.json()["purchaseOrder"]


def test_total_includes_transport(purchase_order):
    assert purchase_order["transportCost"] == 50.00
    assert purchase_order["totalCost"] == 305.00
    assert purchase_order["status"] == "pending"
    assert purchase_order["paymentStatus"] is False


def test_without_transport(dealer, provider, substance):
    r = dealer.post("/api/purchase-orders/", json={
        "provider_id": provider.user_id, "substance_id": substance["id"], "quantityOrdered": 3, "unitCost": 9.99,
    })
    assert r.json()["purchaseOrder"]["totalCost"] == 29.97


def test_substance_must_belong_to_provider(dealer, login_as, substance):
    other = login_as("provider")
    r = dealer.post("/api/purchase-orders/", json={
        "provider_id": other.user_id, "substance_id": substance["id"], "quantityOrdered": 1, "unitCost": 1,
    })
    assert r.status_code == 400


def test_paying_creates_inventory_once(dealer, purchase_order, substance):
    assert dealer.get("/api/inventory/").json()["inventory"] == []

    r = dealer.put(f"/api/purchase-orders/{purchase_order['id']}", json={"paymentStatus": True, "paymentMethod": "wire"})
    assert r.status_code == 200, r.text
    assert r.json()["purchaseOrder"]["paymentStatus"] is True
    assert r.json()["purchaseOrder"]["paymentDate"] is not None

    [row] = dealer.get("/api/inventory/").json()["inventory"]
    assert row["substance_id"] == substance["id"]
    assert row["quantityAvailable"] == 10
    assert row["warehouse"] == "Warehouse T"

    # already paid: no second receipt
    dealer.put(f"/api/purchase-orders/{purchase_order['id']}", json={"paymentStatus": True})
    [row] = dealer.get("/api/inventory/").json()["inventory"]
    assert row["quantityAvailable"] == 10


def test_paying_adds_to_existing_inventory(dealer, stocked, purchase_order):
    dealer.put(f"/api/purchase-orders/{purchase_order['id']}", json={"paymentStatus": True})
    r = dealer.get(f"/api/inventory/{stocked['id']}")
    assert r.json()["inventoryItem"]["quantityAvailable"] == 20


def test_provider_sees_and_confirms(provider, purchase_order):
    assert provider.get(f"/api/providers/{provider.user_id}/purchase-orders").json()["purchaseOrders"][0]["id"] == purchase_order["id"]
    r = provider.put(f"/api/purchase-orders/{purchase_order['id']}", json={"status": "confirmed"})
    assert r.status_code == 200
    assert r.json()["purchaseOrder"]["status"] == "confirmed"


def test_list_filters(dealer, provider, purchase_order):
    assert len(dealer.get("/api/purchase-orders/").json()["purchaseOrders"]) == 1
    assert dealer.get("/api/purchase-orders/", params={"status": "received"}).json()["purchaseOrders"] == []
    assert len(provider.get("/api/purchase-orders/", params={"paymentStatus": False}).json()["purchaseOrders"]) == 1
    assert len(dealer.get(f"/api/dealers/{dealer.user_id}/purchase-orders").json()["purchaseOrders"]) == 1


def test_strangers_are_rejected(login_as, customer, purchase_order):
    other_dealer = login_as("dealer")
    assert other_dealer.get(f"/api/purchase-orders/{purchase_order['id']}").status_code == 403
    assert other_dealer.put(f"/api/purchase-orders/{purchase_order['id']}", json={"paymentStatus": True}).status_code == 403
    assert customer.get("/api/purchase-orders/").status_code == 403

    other_provider = login_as("provider")
    r = other_provider.get(f"/api/providers/{other_provider.user_id - 1}/purchase-orders")
    assert r.status_code in (403, 404)


def test_delete_unpaid_only(dealer, provider, substance, purchase_order):
    dealer.put(f"/api/purchase-orders/{purchase_order['id']}", json={"paymentStatus": True})
    r = dealer.delete(f"/api/purchase-orders/{purchase_order['id']}")
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete a paid purchase order"

    unpaid = dealer.post("/api/purchase-orders/", json={
        "provider_id": provider.user_id, "substance_id": substance["id"], "quantityOrdered": 1, "unitCost": 1,
    }).json()["purchaseOrder"]
    assert dealer.delete(f"/api/purchase-orders/{unpaid['id']}").status_code == 200


def test_paid_order_cannot_be_unpaid(dealer, purchase_order):
    url = f"/api/purchase-orders/{purchase_order['id']}"
    assert dealer.put(url, json={"paymentStatus": True}).status_code == 200

    r = dealer.put(url, json={"paymentStatus": False})
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot mark a paid purchase order as unpaid"
    assert dealer.get(url).json()["purchaseOrder"]["paymentStatus"] is True

    # paying again does not receive the stock a second time
    dealer.put(url, json={"paymentStatus": True})
    [row] = dealer.get("/api/inventory/").json()["inventory"]
    assert row["quantityAvailable"] == 10


def test_paid_order_stays_undeletable(dealer, purchase_order):
    url = f"/api/purchase-orders/{purchase_order['id']}"
    dealer.put(url, json={"paymentStatus": True})
    dealer.put(url, json={"paymentStatus": False})

    assert dealer.delete(url).status_code == 400
    assert dealer.get(url).status_code == 200
