import asyncio

import pytest
from fastapi import HTTPException

from marketplace.services.image_service import ImageService
from tests.conftest import PNG_BYTES

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24


def _upload(client, path, content=PNG_BYTES, filename="photo.png", content_type="image/png"):
    return client.post(path, files={"image": (filename, content, content_type)})


def test_provider_uploads_substance_image(provider, customer, substance, tmp_path):
    r = _upload(provider, f"/api/images/substance/{substance['id']}")
    assert r.status_code == 200, r.text
    url = r.json()["imageUrl"]
    assert url == f"/uploads/substances/substance-{substance['id']}.png"
    assert (tmp_path / "uploads" / "substances" / f"substance-{substance['id']}.png").read_bytes() == PNG_BYTES

    assert customer.get(f"/api/images/substance/{substance['id']}").json()["imageUrl"] == url
    assert customer.get(f"/api/substances/{substance['id']}").json()["substance"]["image_url"] == url


def test_reupload_replaces_other_extension(provider, substance, tmp_path):
    _upload(provider, f"/api/images/substance/{substance['id']}")
    r = _upload(provider, f"/api/images/substance/{substance['id']}", JPEG_BYTES, "photo.jpg", "image/jpeg")
    assert r.json()["imageUrl"].endswith(".jpg")
    assert [p.name for p in (tmp_path / "uploads" / "substances").iterdir()] == [f"substance-{substance['id']}.jpg"]


def test_only_owner_uploads(login_as, dealer, substance, stocked):
    other = login_as("provider")
    r = _upload(other, f"/api/images/substance/{substance['id']}")
    assert r.status_code == 403
    assert r.json()["message"] == "Cannot change images of other providers substances"

    assert _upload(dealer, f"/api/images/substance/{substance['id']}").status_code == 403
    assert _upload(dealer, f"/api/images/inventory/{stocked['id']}").status_code == 200


def test_rejects_non_images(provider, substance):
    r = _upload(provider, f"/api/images/substance/{substance['id']}", b"%PDF-1.4 not an image at all", "doc.pdf",
                "application/pdf")
    assert r.status_code == 400

    r = _upload(provider, f"/api/images/substance/{substance['id']}", b"plain text pretending", "fake.png")
    assert r.status_code == 400
    assert r.json()["message"] == "File is not a valid image"


def test_delete_and_missing(provider, substance):
    path = f"/api/images/substance/{substance['id']}"
    assert provider.delete(path).status_code == 404
    _upload(provider, path)
    assert provider.delete(path).json()["message"] == "Image deleted successfully"
    assert provider.get(path).status_code == 404


def test_unknown_type(customer):
    r = customer.get("/api/images/spaceship/1")
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid type"


def test_size_limit(tmp_path):
    service = ImageService(base_dir=str(tmp_path), max_bytes=64)
    with pytest.raises(HTTPException) as info:
        asyncio.run(service.validate_image_file(PNG_BYTES + b"\x00" * 64, "big.png", "image/png"))
    assert info.value.status_code == 400


def test_service_round_trip(tmp_path):
    service = ImageService(base_dir=str(tmp_path))
    assert service.get_image_url("dealer", 3) is None

    url = asyncio.run(service.save_image(PNG_BYTES, "me.PNG", "dealer", 3))
    assert url == "/uploads/dealers/dealer-3.png"
    assert service.image_exists("dealer", 3)
    assert not service.image_exists("dealer", 33)

    assert service.delete_image("dealer", 3) is True
    assert service.delete_image("dealer", 3) is False
