from tests.conftest import auth_header

ADDRESS = "/api/v1/address"

VALID = {
    "street": "Avenida Afonso Pena",
    "number": "1500",
    "district": "Funcionarios",
    "city": "Belo Horizonte",
    "state": "mg",
    "zipCode": "30130-005",
}


def test_address_lifecycle(client, homeless):
    headers = auth_header(homeless)

    assert client.get(ADDRESS, headers=headers).status_code == 404

    created = client.post(ADDRESS, json=VALID, headers=headers)
    assert created.status_code == 201
    assert created.json()["state"] == "MG"
    assert created.json()["zipCode"] == "30130005"
    assert created.json()["userId"] == str(homeless.id)

    assert client.post(ADDRESS, json=VALID, headers=headers).status_code == 409

    updated = client.put(ADDRESS, json={"number": "1600"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["number"] == "1600"
    assert updated.json()["street"] == VALID["street"]

    assert client.delete(ADDRESS, headers=headers).status_code == 204
    assert client.delete(ADDRESS, headers=headers).status_code == 404
    assert client.put(ADDRESS, json={"number": "1700"}, headers=headers).status_code == 404


def test_address_validation(client, homeless):
    headers = auth_header(homeless)

    bad_state = client.post(ADDRESS, json={**VALID, "state": "XX"}, headers=headers)
    assert bad_state.status_code == 400
    assert bad_state.json()["details"][0]["field"] == "state"

    bad_zip = client.post(ADDRESS, json={**VALID, "zipCode": "123"}, headers=headers)
    assert bad_zip.status_code == 400

    short_street = client.post(ADDRESS, json={**VALID, "street": "Rua"}, headers=headers)
    assert short_street.status_code == 400


def test_address_requires_login(client):
    assert client.get(ADDRESS).status_code == 401


def test_new_address_lets_the_user_order(client, homeless, menu):
    headers = auth_header(homeless)
    order = {"paymentMethod": "DEBIT", "items": [{"itemId": menu["pizza"].id, "quantity": 1}]}

    assert client.post("/api/v1/orders", json=order, headers=headers).status_code == 400

    address = client.post(ADDRESS, json=VALID, headers=headers).json()

    placed = client.post("/api/v1/orders", json=order, headers=headers)
    assert placed.status_code == 201
    assert placed.json()["addressId"] == address["id"]
