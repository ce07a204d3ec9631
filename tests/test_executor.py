from __future__ import annotations

import asyncio
import io

import httpx
import pytest

from adapters.http_client import build_async_client
from adapters.response_sink import DirectorySink, StdoutSink
from core.domain.errors import BodyDecodeFailed, RequestFailed
from core.domain.models import Outcome
from core.naming import parse_artifact_name, sha256_hex
from core.services.executor import execute

URL = "https://example.com/index.html"


def run_execute(url, *, settings, transport, sink):
    async def _run():
        async with build_async_client(settings, transport=transport) as client:
            return await execute(url, client=client, settings=settings, sink=sink)

    return asyncio.run(_run())


def test_saves_body_under_content_name(make_settings, fake_web, tmp_path):
    fake_web.routes[URL] = (200, b"<h1>hello</h1>", {"content-type": "text/html"})
    settings = make_settings(directory=tmp_path / "responses")

    result = run_execute(URL, settings=settings, transport=fake_web.transport, sink=DirectorySink(settings.directory))

    assert result.outcome is Outcome.SAVED
    assert result.status_code == 200
    path = result.artifact.path
    assert path.read_bytes() == b"<h1>hello</h1>"
    host, digest = parse_artifact_name(path.name)
    assert host == "example.com"
    assert sha256_hex(path.read_bytes()) == digest


def test_uses_configured_method(make_settings, fake_web):
    seen = []

    async def record(request):
        seen.append(request.method)
        return httpx.Response(200, text="ok")

    fake_web.routes[URL] = record
    settings = make_settings(method="HEAD", stdout=True)
    run_execute(URL, settings=settings, transport=fake_web.transport, sink=StdoutSink(io.StringIO()))
    assert seen == ["HEAD"]


def test_ignored_status_does_nothing(make_settings, fake_web, tmp_path):
    fake_web.routes[URL] = (404, b"not found", {})
    settings = make_settings(directory=tmp_path / "responses", ignore="404")

    result = run_execute(URL, settings=settings, transport=fake_web.transport, sink=DirectorySink(settings.directory))

    assert result.outcome is Outcome.IGNORED
    assert result.outcome.ok
    assert not (tmp_path / "responses").exists()


def test_ignored_status_prints_nothing(make_settings, fake_web):
    fake_web.routes[URL] = (500, b"boom", {})
    out = io.StringIO()
    settings = make_settings(stdout=True, ignore="404,500")

    result = run_execute(URL, settings=settings, transport=fake_web.transport, sink=StdoutSink(out))

    assert result.outcome is Outcome.IGNORED
    assert out.getvalue() == ""


def test_status_not_ignored_is_kept(make_settings, fake_web):
    fake_web.routes[URL] = (404, b"missing", {})
    out = io.StringIO()
    settings = make_settings(stdout=True, ignore="500")

    result = run_execute(URL, settings=settings, transport=fake_web.transport, sink=StdoutSink(out))

    assert result.outcome is Outcome.PRINTED
    assert out.getvalue() == "missing\n"


def test_declared_charset_is_honoured(make_settings, fake_web, tmp_path):
    fake_web.routes[URL] = (200, "café".encode("latin-1"), {"content-type": "text/plain; charset=latin-1"})
    settings = make_settings(directory=tmp_path)

    result = run_execute(URL, settings=settings, transport=fake_web.transport, sink=DirectorySink(tmp_path))

    stored = result.artifact.path.read_bytes()
    assert stored.decode("utf-8") == "café"
    assert sha256_hex(stored) == result.artifact.digest


def test_non_utf8_body_fails(make_settings, fake_web, tmp_path):
    fake_web.routes[URL] = (200, b"\xff\xfe\x00binary", {"content-type": "application/octet-stream"})
    settings = make_settings(directory=tmp_path / "responses")

    with pytest.raises(BodyDecodeFailed):
        run_execute(URL, settings=settings, transport=fake_web.transport, sink=DirectorySink(settings.directory))
    assert not (tmp_path / "responses").exists()


def test_connection_error_is_request_failed(make_settings, fake_web):
    settings = make_settings(stdout=True)
    with pytest.raises(RequestFailed) as excinfo:
        run_execute("https://unreachable.test/", settings=settings, transport=fake_web.transport, sink=StdoutSink(io.StringIO()))
    assert excinfo.value.url == "https://unreachable.test/"


def test_stalled_endpoint_times_out(make_settings, fake_web):
    async def stall(request):
        await asyncio.sleep(5)
        return httpx.Response(200, text="too late")

    fake_web.routes[URL] = stall
    settings = make_settings(stdout=True, timeout_ms=50)

    with pytest.raises(RequestFailed, match="timed out"):
        run_execute(URL, settings=settings, transport=fake_web.transport, sink=StdoutSink(io.StringIO()))


def test_malformed_url_is_request_failed(make_settings):
    settings = make_settings(stdout=True)
    with pytest.raises(RequestFailed):
        run_execute("not a valid url", settings=settings, transport=None, sink=StdoutSink(io.StringIO()))


def test_unencodable_url_is_request_failed(make_settings, fake_web):
    settings = make_settings(stdout=True, timeout_ms=500)
    with pytest.raises(RequestFailed):
        run_execute("http://x/\udcff", settings=settings, transport=fake_web.transport, sink=StdoutSink(io.StringIO()))
