import http.client
import os
import threading
from http.server import ThreadingHTTPServer
from types import SimpleNamespace

import pytest

from vidlang.server import VideoServer, main, make_handler


def _bump_mtime(path, step):
    info = os.stat(path)
    new_ns = info.st_mtime_ns + step * 1_000_000_000
    os.utime(path, ns=(new_ns, new_ns))
    return f"v{new_ns}"


@pytest.fixture
def running(tmp_path):
    video = tmp_path / "video.mp4"
    static = tmp_path / "static"
    static.mkdir()
    (static / "index.html").write_text("<h1>player</h1>")
    (static / "app.js").write_text("let x = 1;")
    vs = VideoServer(str(video))
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), make_handler(vs, str(static)))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield SimpleNamespace(video=video, vs=vs, port=httpd.server_address[1])
    vs.stop()
    httpd.shutdown()
    httpd.server_close()


def _get(port, path, headers=None):
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request("GET", path, headers=headers or {})
        resp = conn.getresponse()
        body = resp.read()
        return resp.status, resp, body
    finally:
        conn.close()


def test_current_etag_missing_file(tmp_path):
    vs = VideoServer(str(tmp_path / "absent.mp4"))
    assert vs.current_etag() is None
    assert vs.poll() is None


def test_current_etag_matches_mtime(tmp_path):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"data")
    vs = VideoServer(str(video))
    assert vs.current_etag() == f"v{os.stat(video).st_mtime_ns}"


def test_poll_reports_each_change_once(tmp_path):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"data")
    vs = VideoServer(str(video))
    first = vs.poll()
    assert first == vs.current_etag()
    assert vs.poll() is None
    second = _bump_mtime(video, 1)
    assert vs.poll() == second
    assert vs.next_change(timeout=0.1) == first
    assert vs.next_change(timeout=0.1) == second
    assert vs.next_change(timeout=0.05) is None


def test_queue_drops_changes_when_full(tmp_path):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"data")
    vs = VideoServer(str(video))
    tags = []
    for step in range(VideoServer.QUEUE_SIZE + 3):
        _bump_mtime(video, 1)
        tags.append(vs.poll())
    queued = []
    while (tag := vs.next_change(timeout=0.01)) is not None:
        queued.append(tag)
    assert queued == tags[: VideoServer.QUEUE_SIZE]


def test_start_watches_in_background(tmp_path):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"data")
    vs = VideoServer(str(video))
    vs.start()
    try:
        assert vs.next_change(timeout=3) == vs.current_etag()
    finally:
        vs.stop()
    assert vs.stopped


def test_video_not_found(running):
    status, _, body = _get(running.port, "/video")
    assert status == 404
    assert b"Video file not found" in body


def test_video_served_with_headers(running):
    running.video.write_bytes(b"0123456789")
    status, resp, body = _get(running.port, "/video")
    assert status == 200
    assert body == b"0123456789"
    assert resp.getheader("Content-Type") == "video/mp4"
    assert resp.getheader("Cache-Control") == "no-cache"
    assert resp.getheader("ETag") == running.vs.current_etag()


def test_video_not_modified(running):
    running.video.write_bytes(b"0123456789")
    etag = running.vs.current_etag()
    status, _, body = _get(running.port, "/video", {"If-None-Match": etag})
    assert status == 304
    assert body == b""


def test_video_stale_etag_gets_content(running):
    running.video.write_bytes(b"0123456789")
    status, _, body = _get(running.port, "/video", {"If-None-Match": "v1"})
    assert status == 200
    assert body == b"0123456789"


def test_video_range(running):
    content = b"0123456789"
    running.video.write_bytes(content)
    status, resp, body = _get(running.port, "/video", {"Range": "bytes=2-4"})
    assert status == 206
    assert body == content[2:5]
    assert resp.getheader("Content-Range") == f"bytes 2-4/{len(content)}"


def test_video_suffix_range(running):
    content = b"0123456789"
    running.video.write_bytes(content)
    status, _, body = _get(running.port, "/video", {"Range": "bytes=-3"})
    assert status == 206
    assert body == content[-3:]


def test_video_unsatisfiable_range(running):
    content = b"0123456789"
    running.video.write_bytes(content)
    status, resp, _ = _get(running.port, "/video", {"Range": "bytes=50-60"})
    assert status == 416
    assert resp.getheader("Content-Range") == f"bytes */{len(content)}"


def test_index_page(running):
    status, resp, body = _get(running.port, "/")
    assert status == 200
    assert body == b"<h1>player</h1>"
    assert resp.getheader("Content-Type") == "text/html"


def test_static_file_and_missing(running):
    status, _, body = _get(running.port, "/static/app.js")
    assert status == 200
    assert body == b"let x = 1;"
    status, _, _ = _get(running.port, "/static/nope.js")
    assert status == 404
    status, _, _ = _get(running.port, "/static/../video.mp4")
    assert status == 404


def test_index_without_static_dir(tmp_path):
    vs = VideoServer(str(tmp_path / "video.mp4"))
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), make_handler(vs, None))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        status, _, body = _get(httpd.server_address[1], "/")
    finally:
        httpd.shutdown()
        httpd.server_close()
    assert status == 500
    assert b"Could not read index.html" in body


def test_events_stream(running):
    running.video.write_bytes(b"data")
    initial = running.vs.current_etag()
    conn = http.client.HTTPConnection("127.0.0.1", running.port, timeout=5)
    try:
        conn.request("GET", "/events")
        resp = conn.getresponse()
        assert resp.status == 200
        assert resp.getheader("Content-Type") == "text/event-stream"
        assert resp.getheader("Access-Control-Allow-Origin") == "*"
        assert resp.fp.readline() == b"event: version\n"
        assert resp.fp.readline() == f"data: {initial}\n".encode()
        assert resp.fp.readline() == b"\n"

        running.vs.poll()
        assert resp.fp.readline() == b"event: version\n"
        assert resp.fp.readline() == f"data: {initial}\n".encode()

        assert resp.fp.readline() == b"\n"
        changed = _bump_mtime(running.video, 2)
        running.vs.poll()
        assert resp.fp.readline() == b"event: version\n"
        assert resp.fp.readline() == f"data: {changed}\n".encode()
    finally:
        running.vs.stop()
        conn.close()


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit) as excinfo:
        main(["--port", "notaport"])
    assert excinfo.value.code == 2