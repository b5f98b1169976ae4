"""Tests for the static web root and the image directory listing."""
from __future__ import annotations

from client_registry.shared.api.static import render_listing


def test_root_serves_index_page(client):
    r = client.get("/")

    assert r.status_code == 200
    assert "<h1>Welcome</h1>" in r.text


def test_root_serves_files(client):
    r = client.get("/about.html")

    assert r.status_code == 200
    assert r.text == "<p>About</p>"


def test_root_missing_file_is_404(client):
    assert client.get("/nope.html").status_code == 404


def test_images_directory_listing(client):
    r = client.get("/images/")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Index of /images/" in r.text
    assert '<a href="/images/cat.png">cat.png</a>' in r.text
    assert '<a href="/images/icons/">icons/</a>' in r.text


def test_images_without_trailing_slash_redirects_to_listing(client):
    r = client.get("/images", follow_redirects=False)

    assert r.status_code in (302, 307)
    assert r.headers["location"] == "/images/"


def test_images_subdirectory_listing(client):
    r = client.get("/images/icons/")

    assert r.status_code == 200
    assert "Index of /images/icons/" in r.text
    assert '<a href="/images/icons/star.svg">star.svg</a>' in r.text


def test_images_serves_files(client):
    r = client.get("/images/cat.png")

    assert r.status_code == 200
    assert r.content == b"\x89PNG\r\n\x1a\nfake"


def test_images_missing_file_is_404(client):
    assert client.get("/images/dog.png").status_code == 404


def test_static_root_does_not_shadow_api_routes(client):
    assert client.get("/clients").json() == "Clients are: "
    assert client.post("/", data={"name": "Alice"}).json() == "Thanks, Alice"


def test_render_listing_escapes_names(tmp_path):
    (tmp_path / "a&b <x>.txt").write_text("x", encoding="utf-8")

    body = render_listing("/images/", str(tmp_path))

    assert "a&amp;b &lt;x&gt;.txt" in body
    assert 'href="/images/a%26b%20%3Cx%3E.txt"' in body
