from app.version import API_PREFIX

ADDRESS = {"fullName": "Alice", "phone": "9300000001", "addressLine1": "12 Lake Road",
           "city": "Bengaluru", "state": "KA", "pincode": "560001"}


def _funded_room(client, login):
    _, alice = login("9300000001", "Alice")
    _, bob = login("9300000002", "Bob")
    rid = client.post(f"{API_PREFIX}/groups", json={"name": "PG 3"}, headers=alice).get_json()["data"]["id"]
    client.post(f"{API_PREFIX}/groups/{rid}/join", headers=bob)
    item = client.post(f"{API_PREFIX}/room-cart/add", headers=alice, json={
        "roomId": rid, "productId": 9, "name": "Detergent", "unitPrice": 40000,
    }).get_json()["data"]
    client.post("/__wallet/seed", json={"phone": "9300000002", "amount": 40000})
    r = client.post(f"{API_PREFIX}/groups/{rid}/contributions", headers=bob, json={
        "cartItemId": item["id"], "amount": 40000, "paymentMethod": "wallet",
    })
    assert r.status_code == 201
    return rid, item, alice, bob


def test_status_lists_address_blockers(client, login):
    rid, _, alice, _ = _funded_room(client, login)
    data = client.get(f"{API_PREFIX}/groups/{rid}/status", headers=alice).get_json()["data"]
    assert data["state"] == "ready_to_order"
    assert data["canPlaceOrder"] is False
    assert data["addressProblems"][0]["slot"] == "primary"


def test_incomplete_address_is_saved_but_blocks_order(client, login):
    rid, _, alice, _ = _funded_room(client, login)
    partial = {**ADDRESS, "isPrimary": True}
    partial.pop("pincode")
    r = client.post(f"{API_PREFIX}/groups/{rid}/addresses", json=partial, headers=alice)
    assert r.status_code == 200
    assert r.get_json()["data"]["isComplete"] is False

    r = client.post(f"{API_PREFIX}/groups/{rid}/place-order", headers=alice)
    assert r.status_code == 400
    body = r.get_json()
    assert body["message"] == "Delivery address incomplete"
    assert body["details"]["addressProblems"] == [{"slot": "primary", "missing": ["pincode"]}]

    data = client.get(f"{API_PREFIX}/groups/{rid}/status", headers=alice).get_json()["data"]
    assert data["state"] == "ready_to_order"


def test_place_order_then_room_is_closed(client, login):
    rid, item, alice, bob = _funded_room(client, login)
    client.post(f"{API_PREFIX}/groups/{rid}/addresses", json={**ADDRESS, "isPrimary": True}, headers=alice)

    r = client.post(f"{API_PREFIX}/groups/{rid}/place-order", headers=bob)
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["state"] == "placed"
    assert data["order"]["itemsTotal"] == 40000
    assert data["order"]["paymentSummary"]["byMethod"] == {"wallet": 40000}

    r = client.get(f"{API_PREFIX}/room-cart/{rid}", headers=alice)
    assert r.get_json()["data"]["items"] == []

    r = client.post(f"{API_PREFIX}/groups/{rid}/contributions", headers=alice, json={
        "cartItemId": item["id"], "amount": 100, "paymentMethod": "cod",
    })
    assert r.status_code == 409
    assert r.get_json()["code"] == "RoomClosed"

    r = client.post(f"{API_PREFIX}/room-cart/add", headers=alice, json={
        "roomId": rid, "productId": 1, "name": "Soap", "unitPrice": 2000,
    })
    assert r.status_code == 409

    r = client.post(f"{API_PREFIX}/wallet/checkout", json={"roomId": rid}, headers=alice)
    assert r.status_code == 409


def test_wallet_checkout_places_order(client, login):
    rid, _, alice, _ = _funded_room(client, login)
    client.post(f"{API_PREFIX}/groups/{rid}/addresses", json={**ADDRESS, "isPrimary": True}, headers=alice)
    r = client.post(f"{API_PREFIX}/wallet/checkout", json={"roomId": rid}, headers=alice)
    assert r.status_code == 201
    assert r.get_json()["data"]["order"]["roomId"] == rid


def test_per_member_addresses(client, login):
    rid, _, alice, bob = _funded_room(client, login)
    r = client.post(f"{API_PREFIX}/groups/{rid}/delivery-mode", json={"deliveryMode": "per_member"}, headers=alice)
    assert r.status_code == 200
    client.post(f"{API_PREFIX}/groups/{rid}/addresses", json=ADDRESS, headers=alice)
    data = client.get(f"{API_PREFIX}/groups/{rid}/addresses", headers=alice).get_json()["data"]
    assert data["deliveryMode"] == "per_member"
    assert len(data["addresses"]) == 1
    assert len(data["problems"]) == 1

    client.post(f"{API_PREFIX}/groups/{rid}/addresses", json={**ADDRESS, "fullName": "Bob"}, headers=bob)
    r = client.post(f"{API_PREFIX}/groups/{rid}/place-order", headers=alice)
    assert r.status_code == 201
    assert len(r.get_json()["data"]["order"]["deliveryAddresses"]) == 2


def test_unfunded_room_cannot_order(client, login):
    _, alice = login("9300000101")
    rid = client.post(f"{API_PREFIX}/groups", json={"name": "Solo"}, headers=alice).get_json()["data"]["id"]
    client.post(f"{API_PREFIX}/room-cart/add", headers=alice, json={
        "roomId": rid, "productId": 1, "name": "Tea", "unitPrice": 9000,
    })
    r = client.post(f"{API_PREFIX}/groups/{rid}/place-order", headers=alice)
    assert r.status_code == 400
    assert r.get_json()["message"] == "Not all items are fully funded"
