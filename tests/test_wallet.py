from app.version import API_PREFIX


def test_new_member_wallet_is_empty(client, login):
    _, headers = login("9400000001")
    r = client.get(f"{API_PREFIX}/wallet", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"] == {"balance": 0, "balanceDisplay": "₹0.00"}


def test_load_and_history(client, login):
    _, headers = login("9400000002")
    r = client.post(f"{API_PREFIX}/wallet/load", json={"amount": 25050, "reference": "upi-topup"}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["balanceDisplay"] == "₹250.50"

    r = client.post(f"{API_PREFIX}/wallet/load", json={"amount": 0}, headers=headers)
    assert r.status_code == 422

    r = client.get(f"{API_PREFIX}/wallet/history", headers=headers)
    txns = r.get_json()["data"]["transactions"]
    assert len(txns) == 1
    assert txns[0]["type"] == "recharge"
    assert txns[0]["reference"] == "upi-topup"
    assert txns[0]["amount"] == 25050


def test_wallet_requires_auth(client):
    assert client.get(f"{API_PREFIX}/wallet").status_code == 401
