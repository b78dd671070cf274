def test_customer_profile_is_private(customer, login_as):
    r = customer.get(f"/api/customers/{customer.user_id}")
    assert r.status_code == 200
    assert r.json()["customer"]["username"] == customer.username

    other = login_as("customer")
    r = other.get(f"/api/customers/{customer.user_id}")
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied. You can only view your own profile."

    assert login_as("dealer").get(f"/api/customers/{customer.user_id}").status_code == 403


def test_update_profile(customer, anon):
    r = customer.put(f"/api/customers/{customer.user_id}", json={"address": "2 New Road", "password": "newsecret"})
    assert r.status_code == 200
    assert r.json()["customer"]["address"] == "2 New Road"

    r = anon.post("/api/auth/login", json={"username": customer.username, "password": "newsecret", "userType": "customer"})
    assert r.status_code == 200


def test_update_to_taken_email(customer, login_as):
    other = login_as("customer")
    r = customer.put(f"/api/customers/{customer.user_id}", json={"email": f"{other.username}@example.com"})
    assert r.status_code == 400
    assert r.json()["message"] == "Email already exists"


def test_delete_account_ends_sessions(customer):
    r = customer.delete(f"/api/customers/{customer.user_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "Customer account deleted successfully"
    assert customer.get("/api/auth/profile").status_code == 401


def test_dealer_profile(dealer, login_as):
    r = dealer.get(f"/api/dealers/{dealer.user_id}")
    assert r.json()["dealer"]["warehouse"] == "Warehouse T"
    assert r.json()["dealer"]["rating"] == 0

    other = login_as("dealer")
    r = other.put(f"/api/dealers/{dealer.user_id}", json={"warehouse": "X"})
    assert r.status_code == 403
    assert r.json()["message"] == "Cannot update other dealer profiles"


def test_provider_profile_is_public(provider, customer, login_as):
    r = customer.get(f"/api/providers/{provider.user_id}")
    assert r.status_code == 200
    assert r.json()["provider"]["businessName"] == f"{provider.username} Ltd"

    other = login_as("provider")
    assert other.delete(f"/api/providers/{provider.user_id}").status_code == 403
    assert customer.get("/api/providers/999").status_code == 404


def test_unknown_ids(customer, dealer):
    assert customer.get("/api/customers/999").status_code == 404
    assert dealer.get("/api/dealers/999").status_code == 404
