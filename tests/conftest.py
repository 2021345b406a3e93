"""Test configuration and fixtures for Photoshelf.

This module provides isolated test environments:
- Temporary database (SQLite) per test
- Registered users with bearer tokens
- Real JPEG/PNG bytes generated with Pillow
"""
import io
import sys
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure photoshelf is importable
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path,
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict, monkeypatch: pytest.MonkeyPatch):
    """Point photoshelf configuration at the isolated database."""
    import photoshelf.config as config

    monkeypatch.setattr(config, "DATABASE_PATH", isolated_environment["db_path"])
    monkeypatch.setattr(config, "BASE_DIR", isolated_environment["base_dir"])
    yield isolated_environment


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict) -> Path:
    """Initialize fresh database with schema for each test."""
    from photoshelf.database import init_db

    init_db()
    return patched_config["db_path"]


@pytest.fixture(scope="function")
def db(fresh_database: Path):
    """Open a connection to the fresh database (closed after the test)."""
    from photoshelf.database import create_connection

    conn = create_connection()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    from photoshelf.main import app

    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, username: str, email: str, password: str) -> Dict:
    """Sign up and sign in through the API; return credentials with token."""
    response = client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": password}
    )
    assert response.status_code == 200, f"Signup failed: {response.text}"

    response = client.post(
        "/api/auth/signin",
        json={"usernameOrEmail": username, "password": password}
    )
    assert response.status_code == 200, f"Signin failed: {response.text}"
    token = response.json()["accessToken"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200

    return {
        "id": me.json()["id"],
        "username": username,
        "email": email,
        "password": password,
        "token": token,
        "headers": headers,
    }


@pytest.fixture(scope="function")
def test_user(client: TestClient) -> Dict:
    """Create a test user and return credentials.

    Returns:
        Dict with: id, username, email, password, token, headers
    """
    return _register(client, "testuser", "testuser@example.com", "TestPass123!")


@pytest.fixture(scope="function")
def second_user(client: TestClient) -> Dict:
    """Create a second user for ownership testing."""
    return _register(client, "seconduser", "second@example.com", "SecondPass123!")


@pytest.fixture(scope="function")
def auth_headers(test_user: Dict) -> Dict:
    """Authorization header for test_user."""
    return test_user["headers"]


@pytest.fixture(scope="function")
def image_factory() -> Callable[..., bytes]:
    """Build real image bytes in memory.

    Usage:
        png = image_factory("PNG", color="blue")
    """
    from PIL import Image

    def make(fmt: str = "JPEG", color: str = "red", size: int = 32) -> bytes:
        img = Image.new("RGB", (size, size), color=color)
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
        return buffer.getvalue()

    return make


@pytest.fixture(scope="function")
def test_image_bytes(image_factory) -> bytes:
    """Create minimal valid JPEG image in memory."""
    return image_factory("JPEG")


@pytest.fixture(scope="function")
def photo_factory(client: TestClient, test_image_bytes: bytes) -> Callable[..., Dict]:
    """Upload photos through the API.

    Usage:
        photo = photo_factory(headers, title="Sunset", gallery_id=3)
    """
    def upload(
        headers: Dict,
        title: str = "Photo",
        gallery_id: int | None = None,
        filename: str = "photo.jpg",
        data: bytes | None = None,
        content_type: str = "image/jpeg",
    ) -> Dict:
        form = {"title": title}
        if gallery_id is not None:
            form["galleryId"] = str(gallery_id)
        response = client.post(
            "/api/photos",
            headers=headers,
            data=form,
            files={"file": (filename, data if data is not None else test_image_bytes, content_type)}
        )
        assert response.status_code == 200, f"Upload failed: {response.text}"
        return response.json()

    return upload


@pytest.fixture(scope="function")
def gallery_factory(client: TestClient) -> Callable[..., Dict]:
    """Create galleries through the API."""
    def create(headers: Dict, name: str = "Gallery", description: str | None = None) -> Dict:
        response = client.post(
            "/api/galleries",
            headers=headers,
            json={"name": name, "description": description}
        )
        assert response.status_code == 200, f"Gallery creation failed: {response.text}"
        return response.json()

    return create


@pytest.fixture(scope="function")
def uploaded_photo(photo_factory, auth_headers: Dict) -> Dict:
    """Upload a test photo for test_user and return its JSON."""
    return photo_factory(auth_headers, title="Test Photo", filename="test.jpg")
