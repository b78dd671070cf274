def test_provider_substance_crud(provider, customer):
    r = provider.post("/api/substances/", json={"substanceName": "L-Theanine", "category": "Amino Acids"})
    assert r.status_code == 201
    s = r.json()["substance"]
    assert s["provider_id"] == provider.user_id

    assert customer.get(f"/api/substances/{s['id']}").json()["substance"]["substanceName"] == "L-Theanine"
    assert len(customer.get("/api/substances/", params={"category": "Amino Acids"}).json()["substances"]) == 1
    assert customer.get(f"/api/providers/{provider.user_id}/substances").json()["substances"][0]["id"] == s["id"]

    r = provider.put(f"/api/substances/{s['id']}", json={"description": "From green tea"})
    assert r.json()["substance"]["description"] == "From green tea"
    assert r.json()["substance"]["substanceName"] == "L-Theanine"

    assert provider.delete(f"/api/substances/{s['id']}").status_code == 200
    assert customer.get(f"/api/substances/{s['id']}").status_code == 404


def test_only_providers_create_substances(dealer, customer):
    for client in (dealer, customer):
        r = client.post("/api/substances/", json={"substanceName": "Anything"})
        assert r.status_code == 403


def test_other_provider_cannot_edit(login_as, substance):
    other = login_as("provider")
    r = other.put(f"/api/substances/{substance['id']}", json={"substanceName": "Hijacked"})
    assert r.status_code == 403
    assert r.json()["message"] == "Cannot update substances from other providers"
    assert other.delete(f"/api/substances/{substance['id']}").status_code == 403


def test_transport_options(provider, dealer, login_as):
    r = provider.post("/api/provider-transports/", json={
        "transportMethod": "Air Freight Express", "transportCost": 500, "costPerKG": 15.5,
    })
    assert r.status_code == 201
    t = r.json()["transport"]
    assert t["transportCost"] == 500.0
    assert t["costPerKG"] == 15.5

    options = dealer.get(f"/api/providers/{provider.user_id}/transport-options").json()["transportOptions"]
    assert [o["id"] for o in options] == [t["id"]]
    assert len(dealer.get("/api/provider-transports/", params={"provider_id": provider.user_id}).json()["transports"]) == 1

    other = login_as("provider")
    r = other.put(f"/api/provider-transports/{t['id']}", json={"transportCost": 1})
    assert r.status_code == 403
    assert r.json()["message"] == "Cannot update other providers transport options"

    r = provider.put(f"/api/provider-transports/{t['id']}", json={"transportCost": 450})
    assert r.json()["transport"]["transportCost"] == 450.0
    assert provider.delete(f"/api/provider-transports/{t['id']}").status_code == 200
    assert dealer.get(f"/api/provider-transports/{t['id']}").status_code == 404


def test_transport_missing_fields(provider):
    r = provider.post("/api/provider-transports/", json={"transportMethod": "Rail"})
    assert r.status_code == 400
    assert r.json()["message"] == "Missing required fields: transportCost, costPerKG"


def test_transport_requires_provider(dealer):
    r = dealer.post("/api/provider-transports/", json={"transportMethod": "Rail", "transportCost": 1, "costPerKG": 1})
    assert r.status_code == 403
