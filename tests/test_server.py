"""Tests for the local preview server."""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath

from dirsite.server import create_server, file_url, serve


def test_file_url_points_at_start_page(tmp_path: Path) -> None:
    """The fallback hint is an absolute ``file://`` URL."""
    url = file_url(tmp_path, PurePosixPath("docs/index.html"))
    assert url.startswith("file://")
    assert url.endswith("/docs/index.html")


def test_create_server_binds_requested_address(tmp_path: Path) -> None:
    """Port ``0`` asks the OS for any free port."""
    server = create_server(tmp_path, "127.0.0.1", 0)
    try:
        host, port = server.server_address[:2]
        assert host == "127.0.0.1"
        assert port > 0
    finally:
        server.server_close()


def test_serve_falls_back_when_bind_fails(tmp_path: Path, mocker: typ.Any) -> None:
    """A server that cannot start degrades to a ``file://`` hint."""
    mocker.patch("dirsite.server.create_server", side_effect=OSError("in use"))
    messages: list[str] = []
    serve(tmp_path, PurePosixPath("index.html"), echo=messages.append)
    assert messages == [f"open {(tmp_path / 'index.html').resolve().as_uri()}"]


def test_serve_announces_url_and_stops_on_interrupt(
    tmp_path: Path, mocker: typ.Any
) -> None:
    """The start page URL is printed and Ctrl-C ends serving cleanly."""
    server = mocker.MagicMock()
    server.__enter__.return_value = server
    server.serve_forever.side_effect = KeyboardInterrupt
    mocker.patch("dirsite.server.create_server", return_value=server)
    messages: list[str] = []
    serve(tmp_path, PurePosixPath("docs/index.html"), echo=messages.append)
    assert messages == ["serving http://127.0.0.1:8000/docs/index.html"]
    server.serve_forever.assert_called_once_with()
