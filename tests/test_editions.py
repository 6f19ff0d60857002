from fastapi import status

from app.models import Edition, Title


def _form(**overrides) -> dict:
    data = {
        "name": "Christmas Edition",
        "draw_date": "2026-12-24T20:00:00Z",
        "order": "1",
        "value": "10",
        "initial_title": "T0001",
        "end_title": "T0005",
    }
    data.update(overrides)
    return data


def test_create_edition_success(client, db, base_titles):
    """Test creating an edition with its title range."""
    response = client.post("/api/editions", data=_form())

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Christmas Edition"
    assert data["status"] == "OPEN"
    assert data["order"] == 1
    assert data["image_url"] is None
    assert [title["name"] for title in data["titles"]] == ["T0001", "T0002", "T0003", "T0004", "T0005"]
    assert {title["value"] for title in data["titles"]} == {10}
    assert data["fisical_titles"] == []

    assert db.query(Edition).count() == 1


def test_create_edition_default_value_and_status(client, base_titles):
    """Missing value falls back to 5 and status to OPEN."""
    form = _form()
    del form["value"]
    response = client.post("/api/editions", data=form)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "OPEN"
    assert {title["value"] for title in data["titles"]} == {5}


def test_create_edition_strips_formatting_from_value(client, base_titles):
    response = client.post("/api/editions", data=_form(value="R$ 1.500"))

    assert response.status_code == status.HTTP_201_CREATED
    assert {title["value"] for title in response.json()["titles"]} == {1500}


def test_create_edition_with_image(client, s3_client, base_titles):
    """Test banner upload goes to storage and its URL is stored."""
    response = client.post(
        "/api/editions",
        data=_form(),
        files={"image": ("banner.png", b"\x89PNG", "image/png")},
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["image_key"].startswith("editions/")
    assert data["image_url"] == f"https://cdn.example.com/{data['image_key']}"
    s3_client.upload_fileobj.assert_called_once()
    assert s3_client.upload_fileobj.call_args[1]["ExtraArgs"] == {"ContentType": "image/png"}


def test_create_edition_duplicate_name(client, db, base_titles):
    """Test duplicate edition name is rejected with a conflict."""
    client.post("/api/editions", data=_form())

    response = client.post("/api/editions", data=_form(initial_title="T0006", end_title="T0010"))

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already exists" in response.json()["detail"].lower()
    assert db.query(Edition).count() == 1
    assert db.query(Title).count() == 5


def test_create_edition_requires_name(client):
    form = _form()
    del form["name"]
    response = client.post("/api/editions", data=form)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"][0]["loc"][-1] == "name"


def test_create_edition_invalid_draw_date(client):
    response = client.post("/api/editions", data=_form(draw_date="not-a-date"))

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_edition_storage_not_configured(client, monkeypatch, base_titles):
    monkeypatch.setenv("S3_BUCKET", "")
    response = client.post(
        "/api/editions",
        data=_form(),
        files={"image": ("banner.png", b"\x89PNG", "image/png")},
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert "S3_BUCKET" in response.json()["detail"]


def test_list_editions_empty(client):
    response = client.get("/api/editions")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_list_editions_ordered(client, edition_factory):
    edition_factory(name="Second", order=2)
    edition_factory(name="First", order=1)

    response = client.get("/api/editions")

    assert response.status_code == status.HTTP_200_OK
    assert [edition["name"] for edition in response.json()] == ["First", "Second"]


def test_get_edition_by_id(client, edition_with_draw, title_factory):
    title_factory(edition_with_draw, "T0001")

    response = client.get(f"/api/editions/{edition_with_draw.id}")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == edition_with_draw.id
    assert [title["name"] for title in data["titles"]] == ["T0001"]
    assert data["fisical_titles"][0]["seller_name"] == "Kiosk 3"


def test_get_edition_not_found(client):
    """Fetching a missing edition is a 404, never an empty success."""
    response = client.get("/api/editions/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "not found" in response.json()["detail"].lower()


def test_update_edition_returns_only_unsold_titles(client, test_edition, title_factory, test_user):
    title_factory(test_edition, "T0001", user_id=test_user.id)
    title_factory(test_edition, "T0002")

    response = client.patch(f"/api/editions/{test_edition.id}", data={"name": "Renamed"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Renamed"
    assert [title["name"] for title in data["titles"]] == ["T0002"]


def test_update_edition_reprices_existing_titles(client, db, base_titles):
    edition_id = client.post("/api/editions", data=_form()).json()["id"]

    response = client.patch(
        f"/api/editions/{edition_id}",
        data={"value": "20", "initial_title": "T0001", "end_title": "T0005"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert {title["value"] for title in response.json()["titles"]} == {20}
    assert db.query(Title).count() == 5


def test_update_edition_ignores_blank_fields(client, test_edition):
    response = client.patch(f"/api/editions/{test_edition.id}", data={"order": "", "status": "CLOSED"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["order"] == 1
    assert data["status"] == "CLOSED"


def test_update_edition_not_found(client):
    response = client.patch("/api/editions/99999", data={"name": "Ghost"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_update_many_editions(client, db, edition_factory):
    first = edition_factory(name="A", order=1)
    second = edition_factory(name="B", order=2)

    response = client.patch(
        "/api/editions",
        json={
            "editions": [
                {"id": first.id, "order": 2},
                {"id": second.id, "order": 1, "draw_date": "2027-01-10T18:00:00Z"},
            ]
        },
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Updated", "status": 200}
    listed = client.get("/api/editions").json()
    assert [edition["name"] for edition in listed] == ["B", "A"]


def test_update_many_editions_missing_id(client, db, edition_factory):
    edition = edition_factory(name="A", order=1)

    response = client.patch(
        "/api/editions",
        json={"editions": [{"id": edition.id, "name": "Changed"}, {"id": 777, "name": "Ghost"}]},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    db.expire_all()
    assert db.query(Edition).filter(Edition.id == edition.id).one().name == "A"


def test_delete_edition(client, db, test_edition, title_factory):
    unsold = title_factory(test_edition, "T0001")
    edition_id = test_edition.id

    response = client.delete(f"/api/editions/{edition_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Deleted", "status": 200}
    assert client.get(f"/api/editions/{edition_id}").status_code == status.HTTP_404_NOT_FOUND
    db.expire_all()
    assert db.query(Title).filter(Title.id == unsold.id).one().edition_id == edition_id


def test_delete_edition_not_found(client):
    response = client.delete("/api/editions/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_draw_items(client, edition_with_draw, closed_edition):
    response = client.get("/api/editions/draw-items")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["name"] == "Car"
    assert data[0]["edition"]["id"] == edition_with_draw.id
    assert data[0]["edition"]["winners"][0]["title_name"] == "T0001"


def test_delete_edition_with_draw_items_and_winners(client, db, edition_with_draw):
    edition_id = edition_with_draw.id

    response = client.delete(f"/api/editions/{edition_id}")

    assert response.status_code == status.HTTP_200_OK
    assert client.get("/api/editions/draw-items").json() == []


def test_update_many_editions_duplicate_name(client, edition_factory):
    edition_factory(name="A", order=1)
    second = edition_factory(name="B", order=2)

    response = client.patch("/api/editions", json={"editions": [{"id": second.id, "name": "A"}]})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already exists" in response.json()["detail"].lower()
