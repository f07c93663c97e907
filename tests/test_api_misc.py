import io
import os

import pytest

from ngohub.core.errors import ValidationError
from ngohub.services.storage_service import CHUNK_SIZE


def test_health(client):
    body = client.get("/api/health").json()

    assert body["status"] == "OK"
    assert body["uptime"] >= 0


def test_unknown_route(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}


def test_upload(client, storage):
    response = client.post("/api/upload", files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")})

    assert response.status_code == 200
    body = response.json()
    assert body["originalName"] == "report.pdf"
    assert body["size"] == 8
    assert body["url"] == f"/uploads/{body['filename']}"


def test_upload_rejects_other_types_and_large_files(client):
    script = client.post("/api/upload", files={"file": ("run.sh", b"echo hi", "text/x-sh")})
    too_big = client.post("/api/upload", files={"file": ("big.png", b"0" * 2048, "image/png")})

    assert script.status_code == 400
    assert script.json() == {"error": "Only images and documents allowed"}
    assert too_big.status_code == 400


def test_upload_without_file(client):
    response = client.post("/api/upload")

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_oversized_upload_stops_early_and_is_not_kept(storage):
    class Endless(io.RawIOBase):
        def __init__(self):
            self.read_bytes = 0

        def readable(self):
            return True

        def read(self, size=-1):
            self.read_bytes += size
            return b"0" * size

    stream = Endless()

    with pytest.raises(ValidationError):
        storage.save("file", "huge.png", "image/png", stream)

    assert stream.read_bytes <= storage.max_bytes + CHUNK_SIZE
    assert os.listdir(storage.upload_dir) == []
