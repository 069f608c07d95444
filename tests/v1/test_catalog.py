from fastapi import status

from trayex.models import Reservation


def test_list_zones(client, zone):
    response = client.get("/api/v1/zones")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [{"id": zone.id, "name": "North Campus"}]


def test_list_stops(client, zone, stop):
    response = client.get(f"/api/v1/zones/{zone.id}/stops")
    assert response.status_code == status.HTTP_200_OK
    assert [item["name"] for item in response.json()] == ["Library"]


def test_timeslots_report_free_seats(client, db_session, zone, timeslot, stop, test_user):
    db_session.add(Reservation(user_id=test_user.id, timeslot_id=timeslot.id, stop_id=stop.id))
    db_session.flush()

    response = client.get(f"/api/v1/zones/{zone.id}/timeslots")
    assert response.status_code == status.HTTP_200_OK
    (item,) = response.json()
    assert item["capacity"] == 2
    assert item["available"] == 1


def test_unknown_zone(client):
    assert client.get("/api/v1/zones/missing/stops").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/zones/missing/timeslots").status_code == status.HTTP_404_NOT_FOUND
