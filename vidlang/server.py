"""HTTP server that plays a frequently rewritten video file and announces changes."""

from __future__ import annotations

import argparse
import logging
import mimetypes
import os
import queue
import sys
import threading
from email.utils import formatdate
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import BinaryIO, Optional
from urllib.parse import unquote, urlsplit

DEFAULT_VIDEO_PATH = "./video.mp4"
DEFAULT_PORT = 8080

_CHUNK_SIZE = 64 * 1024

_LOG = logging.getLogger(__name__)


class VideoServer:
    """Watches one video file and queues a version tag whenever it changes."""

    POLL_INTERVAL = 0.5
    QUEUE_SIZE = 10

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self._changes: queue.Queue[str] = queue.Queue(maxsize=self.QUEUE_SIZE)
        self._last_mtime: Optional[int] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def stopped(self) -> bool:
        """True once :meth:`stop` has been called."""
        return self._stop.is_set()

    def current_etag(self) -> Optional[str]:
        """Version tag of the file as it is now, or None if it does not exist."""
        try:
            return _etag(os.stat(self.file_path).st_mtime_ns)
        except OSError:
            return None

    def poll(self) -> Optional[str]:
        """Check the file once; queue and return a new tag if it has changed.

        A change seen while the queue is full is dropped.
        """
        try:
            mtime = os.stat(self.file_path).st_mtime_ns
        except OSError:
            return None
        with self._lock:
            if mtime == self._last_mtime:
                return None
            self._last_mtime = mtime
        tag = _etag(mtime)
        try:
            self._changes.put_nowait(tag)
        except queue.Full:
            pass
        return tag

    def next_change(self, timeout: Optional[float] = None) -> Optional[str]:
        """Take the next queued tag, waiting up to *timeout* seconds for one."""
        try:
            return self._changes.get(timeout=timeout)
        except queue.Empty:
            return None

    def start(self) -> None:
        """Start polling the file in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._watch, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and end any event streams."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _watch(self) -> None:
        while not self._stop.wait(self.POLL_INTERVAL):
            self.poll()


def _etag(mtime_ns: int) -> str:
    return f"v{mtime_ns}"


def _parse_range(header: str, size: int) -> Optional[tuple[int, int]]:
    """Return the inclusive byte span of a single range, or None to serve all.

    Raises ValueError when the range cannot be satisfied.
    """
    unit, _, spec = header.partition("=")
    if unit.strip().lower() != "bytes" or "," in spec:
        return None
    first, sep, last = spec.strip().partition("-")
    if not sep:
        return None
    try:
        if not first:
            suffix = int(last)
            if suffix <= 0:
                raise ValueError("empty suffix range")
            return max(size - suffix, 0), size - 1
        start = int(first)
        end = int(last) if last else size - 1
    except ValueError:
        raise ValueError("malformed range") from None
    if start < 0 or start >= size or end < start:
        raise ValueError("range not satisfiable")
    return start, min(end, size - 1)


def _copy(source: BinaryIO, target: BinaryIO, length: int) -> None:
    while length > 0:
        chunk = source.read(min(_CHUNK_SIZE, length))
        if not chunk:
            break
        target.write(chunk)
        length -= len(chunk)


def make_handler(
    video_server: VideoServer, static_dir: Optional[str] = None
) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class bound to *video_server* and *static_dir*."""
    static_root = Path(static_dir).resolve() if static_dir else None

    class Handler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args: object) -> None:
            _LOG.debug("%s - %s", self.address_string(), format % args)

        def do_GET(self) -> None:
            path = unquote(urlsplit(self.path).path)
            if path == "/video":
                self._serve_video()
            elif path == "/events":
                self._serve_events()
            elif path == "/":
                self._serve_index()
            else:
                self._serve_static(path)

        def _send_error(self, status: HTTPStatus, message: str) -> None:
            body = (message + "\n").encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("X-Content-Type-Options", "nosniff")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _send_bytes(self, content: bytes, content_type: str) -> None:
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(content)))
            self.end_headers()
            self.wfile.write(content)

        def _serve_index(self) -> None:
            if static_root is None:
                self._send_error(HTTPStatus.INTERNAL_SERVER_ERROR, "Could not read index.html")
                return
            try:
                content = (static_root / "index.html").read_bytes()
            except OSError:
                self._send_error(HTTPStatus.INTERNAL_SERVER_ERROR, "Could not read index.html")
                return
            self._send_bytes(content, "text/html")

        def _serve_static(self, path: str) -> None:
            prefix = "/static/"
            if static_root is None or not path.startswith(prefix):
                self._send_error(HTTPStatus.NOT_FOUND, "404 page not found")
                return
            target = (static_root / path[len(prefix):]).resolve()
            if not target.is_relative_to(static_root) or not target.is_file():
                self._send_error(HTTPStatus.NOT_FOUND, "404 page not found")
                return
            try:
                content = target.read_bytes()
            except OSError:
                self._send_error(HTTPStatus.NOT_FOUND, "404 page not found")
                return
            content_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
            self._send_bytes(content, content_type)

        def _serve_video(self) -> None:
            try:
                info = os.stat(video_server.file_path)
            except OSError:
                self._send_error(HTTPStatus.NOT_FOUND, "Video file not found")
                return
            try:
                handle = open(video_server.file_path, "rb")
            except OSError as exc:
                print(f"Error opening video file: {exc}", file=sys.stderr)
                self._send_error(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Could not open video file"
                )
                return

            with handle:
                etag = _etag(info.st_mtime_ns)
                size = info.st_size
                client_etag = self.headers.get("If-None-Match", "")
                if client_etag and client_etag == etag:
                    self.send_response(HTTPStatus.NOT_MODIFIED)
                    self.send_header("Cache-Control", "no-cache")
                    self.send_header("ETag", etag)
                    self.end_headers()
                    return

                span: Optional[tuple[int, int]] = None
                range_header = self.headers.get("Range")
                if range_header:
                    try:
                        span = _parse_range(range_header, size)
                    except ValueError:
                        self.send_response(HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE)
                        self.send_header("Content-Range", f"bytes */{size}")
                        self.send_header("Content-Length", "0")
                        self.end_headers()
                        return

                if span is None:
                    self.send_response(HTTPStatus.OK)
                    start, length = 0, size
                else:
                    start, end = span
                    length = end - start + 1
                    self.send_response(HTTPStatus.PARTIAL_CONTENT)
                    self.send_header("Content-Range", f"bytes {start}-{end}/{size}")
                self.send_header("Content-Type", "video/mp4")
                self.send_header("Cache-Control", "no-cache")
                self.send_header("ETag", etag)
                self.send_header("Accept-Ranges", "bytes")
                self.send_header(
                    "Last-Modified", formatdate(info.st_mtime, usegmt=True)
                )
                self.send_header("Content-Length", str(length))
                self.end_headers()
                handle.seek(start)
                _copy(handle, self.wfile, length)

        def _send_event(self, etag: str) -> None:
            self.wfile.write(f"event: version\ndata: {etag}\n\n".encode("utf-8"))
            self.wfile.flush()

        def _serve_events(self) -> None:
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/event-stream")
            self.send_header("Cache-Control", "no-cache")
            self.send_header("Connection", "keep-alive")
            self.send_header("Access-Control-Allow-Origin", "*")
            self.end_headers()
            try:
                etag = video_server.current_etag()
                if etag is not None:
                    self._send_event(etag)
                while not video_server.stopped:
                    change = video_server.next_change(timeout=0.25)
                    if change is not None:
                        self._send_event(change)
            except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError):
                return

    return Handler


def serve(
    video_path: str = DEFAULT_VIDEO_PATH,
    port: int = DEFAULT_PORT,
    static_dir: Optional[str] = None,
) -> None:
    """Serve the video, its change events and the player page until interrupted."""
    video_server = VideoServer(video_path)
    video_server.start()
    httpd = ThreadingHTTPServer(("", port), make_handler(video_server, static_dir))
    print(f"Server started at http://localhost:{port}", flush=True)
    try:
        httpd.serve_forever()
    finally:
        video_server.stop()
        httpd.server_close()


def main(argv: Optional[list[str]] = None) -> int:
    """Start the video preview server."""
    arg_parser = argparse.ArgumentParser(
        prog="vidlang-server", description="Serve a video file and announce its changes."
    )
    arg_parser.add_argument("--video", default=DEFAULT_VIDEO_PATH, help="video file to serve")
    arg_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    arg_parser.add_argument("--static", default=None, help="directory of static files")
    args = arg_parser.parse_args(argv)
    try:
        serve(args.video, args.port, args.static)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Server failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())