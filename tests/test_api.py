"""HTTP surface exercised through the FastAPI test client."""
import asyncio

import pytest
from fastapi.testclient import TestClient

from conftest import BlockingBody, client_error, make_settings
from s3browser.main import create_app


@pytest.fixture
def api(s3):
    app = create_app(make_settings(), client=s3)
    with TestClient(app) as client:
        yield client


def test_list_returns_entries_and_parent(api, s3):
    s3.put("photos/2024/beach.jpg", b"jpeg")
    s3.put("photos/2024/raw/img.cr2", b"raw")

    response = api.get("/api/list", params={"path": "/photos/2024/"})

    assert response.status_code == 200
    body = response.json()
    assert body["path"] == "/photos/2024/"
    assert body["prefix"] == "photos/2024/"
    assert body["parent_path"] == "/photos"
    assert body["directory_count"] == 1
    assert body["file_count"] == 1
    assert [(e["name"], e["is_directory"]) for e in body["files"]] == [("raw", True), ("beach.jpg", False)]
    assert body["files"][1]["mime_type"] == "image/jpeg"


def test_list_defaults_to_root(api, s3):
    s3.put("top.txt", b"x")
    body = api.get("/api/list").json()
    assert body["path"] == "/"
    assert body["parent_path"] is None
    assert body["files"][0]["path"] == "top.txt"


def test_list_backend_failure_is_bad_gateway(api, s3):
    s3.failures["list_objects_v2"] = client_error("AccessDenied", "ListObjectsV2", status=403)

    response = api.get("/api/list", params={"path": "a"})

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "backend_error"
    assert body["meta"]["backend_code"] == "AccessDenied"


def test_open_redirects_to_presigned_url(api, s3):
    response = api.get("/api/open", params={"file": "docs/report.pdf"}, follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].startswith("https://test-bucket.s3.example.com/docs/report.pdf")
    assert "content-disposition" not in response.headers


def test_download_redirect_carries_attachment_name(api, s3):
    response = api.get("/api/download", params={"file": "docs/résumé.pdf"}, follow_redirects=False)

    assert response.status_code == 307
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment;")
    assert "filename*=UTF-8''r%C3%A9sum%C3%A9.pdf" in disposition


@pytest.mark.parametrize("route", ["/api/open", "/api/download", "/api/stream", "/api/info"])
def test_missing_file_parameter_is_rejected(api, s3, route):
    response = api.get(route, follow_redirects=False)

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"
    assert s3.calls == []


def test_stream_proxies_body(api, s3):
    s3.put("media/clip.mp4", b"0123456789")

    response = api.get("/api/stream", params={"file": "media/clip.mp4"})

    assert response.status_code == 200
    assert response.content == b"0123456789"
    assert response.headers["content-length"] == "10"
    assert response.headers["content-type"].startswith("video/mp4")
    assert 'filename="clip.mp4"' in response.headers["content-disposition"]
    assert s3.bodies[0].closed


def test_stream_missing_object_is_not_found(api, s3):
    response = api.get("/api/stream", params={"file": "gone.bin"}, headers={"X-Request-ID": "req-404"})

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert body["meta"]["key"] == "gone.bin"
    assert body["request_id"] == "req-404"


def test_info_returns_metadata(api, s3):
    s3.put("notes/todo.md", b"- [ ] ship", content_type="text/markdown")

    body = api.get("/api/info", params={"file": "notes/todo.md"}).json()

    assert body["name"] == "todo.md"
    assert body["path"] == "notes/todo.md"
    assert body["size"] == 10
    assert body["is_directory"] is False
    assert body["mime_type"] == "text/markdown"
    assert body["etag"] == "abc123"


def test_info_missing_object_is_not_found(api):
    response = api.get("/api/info", params={"file": "missing.txt"})
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_request_id_is_echoed_or_generated(api):
    echoed = api.get("/api/version", headers={"X-Request-ID": "trace-123"})
    generated = api.get("/api/version", headers={"X-Request-ID": "bad id with spaces"})

    assert echoed.headers["x-request-id"] == "trace-123"
    assert generated.headers["x-request-id"] != "bad id with spaces"
    assert len(generated.headers["x-request-id"]) == 32


def test_version(api):
    body = api.get("/api/version").json()
    assert body["version"] == "dev"
    assert body["version_string"] == "dev-unknown"
    assert body["is_release"] is False


def test_health_reports_bucket_reachability(api, s3):
    healthy = api.get("/api/health").json()
    s3.failures["head_bucket"] = client_error("403", "HeadBucket", status=403)
    degraded = api.get("/api/health").json()

    assert healthy["status"] == "healthy"
    assert healthy["bucket"] == "test-bucket"
    assert degraded["status"] == "degraded"
    assert degraded["bucket_status"] == "unreachable"
    assert degraded["detail"] == "403"


def test_metrics_group_by_route(api, s3):
    api.get("/api/list", params={"path": "a"})
    api.get("/api/list", params={"path": "b"})
    api.get("/api/info", params={"file": "missing.txt"})

    metrics = api.get("/api/metrics").json()["metrics"]

    assert metrics["api./api/list"]["count"] == 2
    assert metrics["api./api/info"]["client_errors"] == 1
    assert metrics["api./api/info"]["errors"] == 0


def test_shutdown_closes_client(s3):
    with TestClient(create_app(make_settings(), client=s3)):
        assert not s3.closed
    assert s3.closed


def _stream_scope(key):
    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/api/stream",
        "raw_path": b"/api/stream",
        "root_path": "",
        "query_string": f"file={key}".encode(),
        "headers": [(b"host", b"testserver")],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
    }


def test_stream_released_when_client_leaves_before_body(s3):
    s3.put("media/clip.mp4", b"0123456789")
    app = create_app(make_settings(), client=s3)

    async def receive():
        return {"type": "http.disconnect"}

    async def send(message):
        await asyncio.sleep(0)

    asyncio.run(app(_stream_scope("media/clip.mp4"), receive, send))

    assert len(s3.bodies) == 1
    assert s3.bodies[0].closed


def test_stream_released_when_client_leaves_mid_body(s3):
    s3.put("media/huge.bin", b"", body_factory=lambda: BlockingBody(b"first"))
    app = create_app(make_settings(), client=s3)
    chunks = []

    async def scenario():
        first_chunk_sent = asyncio.Event()

        async def receive():
            await first_chunk_sent.wait()
            return {"type": "http.disconnect"}

        async def send(message):
            if message["type"] == "http.response.body" and message.get("body"):
                chunks.append(message["body"])
                first_chunk_sent.set()

        await asyncio.wait_for(app(_stream_scope("media/huge.bin"), receive, send), timeout=5)

    asyncio.run(scenario())

    assert chunks == [b"first"]
    assert s3.bodies[0].closed
