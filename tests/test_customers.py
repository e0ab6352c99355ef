import pytest

from groomroute.domain.customers import service as customer_service
from groomroute.models import Appointment, CustomerWaitlist, Pet
from groomroute.services.geocoding_service import GeocodeResult


@pytest.fixture
def geocoder(monkeypatch):
    calls = []

    async def fake_try_geocode(address):
        calls.append(address)
        if "nowhere" in address.lower():
            return None
        return GeocodeResult(lat=40.1, lng=-75.2, display_name=address)

    monkeypatch.setattr(customer_service, "try_geocode", fake_try_geocode)
    return calls


def test_create_customer_geocodes_address(client, geocoder):
    response = client.post(
        "/customers",
        json={
            "name": "Avery",
            "address": "12 Elm St, Springfield",
            "phone": "(555) 555-0100",
            "pets": [{"name": "Mochi", "species": "Dog", "breed": "Shih Tzu"}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["lat"] == 40.1
    assert data["geocoded"] is True
    assert data["phone"] == "+15555550100"
    assert data["pets"][0]["species"] == "dog"
    assert geocoder == ["12 Elm St, Springfield"]


def test_create_customer_with_coordinates_skips_geocoding(client, geocoder):
    data = client.post(
        "/customers", json={"name": "Avery", "address": "12 Elm St", "lat": 39.9, "lng": -75.1}
    ).json()

    assert (data["lat"], data["lng"]) == (39.9, -75.1)
    assert geocoder == []


def test_unmatched_address_leaves_customer_ungeocoded(client, geocoder):
    data = client.post("/customers", json={"name": "Avery", "address": "Nowhere Lane"}).json()

    assert data["geocoded"] is False
    assert data["lat"] is None


def test_customer_validation(client):
    assert client.post("/customers", json={"name": "", "address": "12 Elm St"}).status_code == 422
    assert (
        client.post(
            "/customers", json={"name": "Avery", "address": "12 Elm St", "phone": "12345"}
        ).status_code
        == 422
    )
    assert (
        client.post(
            "/customers", json={"name": "Avery", "address": "12 Elm St", "lat": 91, "lng": 0}
        ).status_code
        == 422
    )


def test_changing_address_geocodes_again(client, geocoder, make_customer):
    customer = make_customer("Avery", 39.0, -74.0)

    data = client.patch(f"/customers/{customer.id}", json={"address": "99 Oak Ave"}).json()

    assert data["address"] == "99 Oak Ave"
    assert (data["lat"], data["lng"]) == (40.1, -75.2)

    data = client.patch(f"/customers/{customer.id}", json={"address": "Nowhere Lane"}).json()
    assert data["geocoded"] is False


def test_update_without_address_change_keeps_coordinates(client, geocoder, make_customer):
    customer = make_customer("Avery", 39.0, -74.0)

    data = client.patch(f"/customers/{customer.id}", json={"notes": "Gate code 1234"}).json()

    assert data["notes"] == "Gate code 1234"
    assert (data["lat"], data["lng"]) == (39.0, -74.0)
    assert geocoder == []


def test_explicit_null_clears_optional_fields(client, geocoder, make_customer):
    customer = make_customer("Avery", 39.0, -74.0, notes="Gate code 1234", email="a@example.com")

    data = client.patch(
        f"/customers/{customer.id}", json={"notes": None, "email": None, "phone": None}
    ).json()

    assert data["notes"] is None
    assert data["email"] is None
    assert data["phone"] is None
    assert data["name"] == "Avery"
    assert (data["lat"], data["lng"]) == (39.0, -74.0)


def test_required_fields_cannot_be_cleared(client, make_customer):
    customer = make_customer("Avery")

    assert client.patch(f"/customers/{customer.id}", json={"name": None}).status_code == 400
    assert client.patch(f"/customers/{customer.id}", json={"address": "  "}).status_code == 400


def test_list_and_get_customers(client, make_customer):
    make_customer("Blake")
    avery = make_customer("Avery")

    assert [c["name"] for c in client.get("/customers").json()] == ["Avery", "Blake"]
    assert client.get(f"/customers/{avery.id}").json()["pets"][0]["name"] == "Biscuit"
    assert client.get("/customers/999").status_code == 404


def test_delete_customer_removes_appointments_and_waitlist(
    client, db, account, make_customer, make_appointment
):
    customer = make_customer("Avery")
    make_appointment(customer, 9)
    db.add(CustomerWaitlist(account_id=account.id, customer_id=customer.id))
    db.commit()

    assert client.delete(f"/customers/{customer.id}").json()["success"] is True

    assert db.query(Appointment).count() == 0
    assert db.query(CustomerWaitlist).count() == 0
    assert db.query(Pet).count() == 0


def test_pets(client, db, make_customer, make_appointment):
    customer = make_customer("Avery")
    appointment = make_appointment(customer, 9)
    first_pet = customer.pets[0].id

    added = client.post(f"/customers/{customer.id}/pets", json={"name": "Pickle", "species": "cat"})
    assert added.status_code == 200
    pet_id = added.json()["id"]

    updated = client.patch(f"/customers/{customer.id}/pets/{pet_id}", json={"breed": "Siamese"})
    assert updated.json()["breed"] == "Siamese"
    assert updated.json()["name"] == "Pickle"

    cleared = client.patch(f"/customers/{customer.id}/pets/{pet_id}", json={"breed": None, "name": None})
    assert cleared.json()["breed"] is None
    assert cleared.json()["name"] == "Pickle"

    assert client.post(f"/customers/{customer.id}/pets", json={"name": "Rex", "species": "iguana"}).status_code == 422
    assert client.patch(f"/customers/{customer.id}/pets/999", json={"name": "X"}).status_code == 404

    assert client.delete(f"/customers/{customer.id}/pets/{first_pet}").json() == {"success": True}
    db.expire_all()
    assert db.get(Appointment, appointment.id).pet_id is None


def test_assign_area(client, db, account, make_customer):
    from groomroute.models_routing import ServiceArea

    area = ServiceArea(account_id=account.id, name="North")
    db.add(area)
    db.commit()
    customer = make_customer("Avery")

    data = client.post(f"/customers/{customer.id}/assign-area", json={"areaId": area.id}).json()
    assert data["serviceAreaId"] == area.id

    cleared = client.post(f"/customers/{customer.id}/assign-area", json={"areaId": None}).json()
    assert cleared["serviceAreaId"] is None

    missing = client.post(f"/customers/{customer.id}/assign-area", json={"areaId": 999})
    assert missing.status_code == 404
