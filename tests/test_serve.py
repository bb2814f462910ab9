"""Tests for the FastAPI app factory and server runner."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dirindex.app import DirectoryIndex
from dirindex.config import Settings
from dirindex.filters import hide_dotfiles
from dirindex.serve import build_directory_index, create_app, run_server


@pytest.fixture
def docroot(tmp_path):
    root = tmp_path / "www"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / ".secret").write_text("x")
    (root / "sub").mkdir()
    (root / "sub" / "b.txt").write_text("b")
    return root


@pytest.fixture
def names_template(tmp_path):
    path = tmp_path / "names.html"
    path.write_text("{% for f in files %}{{ f.url }}|{% endfor %}")
    return path


# ---------------------------------------------------------------------------
# build_directory_index
# ---------------------------------------------------------------------------


class TestBuildDirectoryIndex:
    def test_plain(self, docroot):
        index = build_directory_index(Settings(root=docroot))
        assert isinstance(index, DirectoryIndex)
        assert index.root == str(docroot)
        assert index.entry_filter is None

    def test_hide_hidden(self, docroot):
        index = build_directory_index(Settings(root=docroot, hide_hidden=True))
        assert index.entry_filter is hide_dotfiles


# ---------------------------------------------------------------------------
# App mounted at the root
# ---------------------------------------------------------------------------


class TestRootMount:
    @pytest.fixture
    def client(self, docroot, names_template):
        settings = Settings(root=docroot, template_file=names_template)
        return TestClient(create_app(settings))

    def test_listing(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "/./|/.secret|/a.txt|/sub/|"

    def test_file(self, client):
        resp = client.get("/sub/b.txt")
        assert resp.text == "b"

    def test_security_headers(self, client):
        resp = client.get("/")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"

    def test_no_openapi(self, client):
        assert client.get("/openapi.json").status_code == 404

    def test_not_found(self, client):
        assert client.get("/nope.txt").status_code == 404


# ---------------------------------------------------------------------------
# App mounted under a prefix
# ---------------------------------------------------------------------------


class TestPrefixMount:
    @pytest.fixture
    def client(self, docroot, names_template):
        settings = Settings(
            root=docroot, template_file=names_template, mount_path="/files", hide_hidden=True
        )
        return TestClient(create_app(settings))

    def test_listing_urls_include_prefix(self, client):
        resp = client.get("/files/")
        assert resp.status_code == 200
        assert resp.text == "/files/./|/files/a.txt|/files/sub/|"

    def test_subdirectory_has_parent(self, client):
        resp = client.get("/files/sub/")
        assert resp.text == "/files/sub/./|/files/sub/../|/files/sub/b.txt|"

    def test_subdirectory_redirect(self, client):
        resp = client.get("/files/sub", follow_redirects=False)
        assert resp.status_code == 301
        assert resp.headers["location"] == "http://testserver/files/sub/"

    def test_mount_point_redirect(self, client):
        resp = client.get("/files", follow_redirects=False)
        assert 300 <= resp.status_code < 400
        assert resp.headers["location"].endswith("/files/")

    def test_file(self, client):
        assert client.get("/files/a.txt").text == "hello"


# ---------------------------------------------------------------------------
# run_server
# ---------------------------------------------------------------------------


class TestRunServer:
    @patch("uvicorn.run")
    def test_runs_uvicorn(self, mock_run, docroot):
        settings = Settings(root=docroot, host="0.0.0.0", port=9100, log_level="debug")
        run_server(settings)

        mock_run.assert_called_once()
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9100
        assert kwargs["log_level"] == "debug"
        assert kwargs["log_config"] is None
