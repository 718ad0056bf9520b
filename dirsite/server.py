"""Serve a built output folder over HTTP for local previewing."""

from __future__ import annotations

import collections.abc as cabc
import functools
import http.server
import typing as typ

import structlog

from dirsite._constants import SERVE_HOST, SERVE_PORT

if typ.TYPE_CHECKING:
    from pathlib import Path, PurePosixPath

logger = structlog.get_logger(__name__)


def file_url(output_root: Path, start_path: PurePosixPath) -> str:
    """Return the ``file://`` URL of the start page."""
    return (output_root / start_path).resolve().as_uri()


def create_server(
    output_root: Path, host: str = SERVE_HOST, port: int = SERVE_PORT
) -> http.server.ThreadingHTTPServer:
    """Bind an HTTP server that serves files from ``output_root``.

    Raises
    ------
    OSError
        If the address cannot be bound.
    """
    handler = functools.partial(
        http.server.SimpleHTTPRequestHandler, directory=str(output_root)
    )
    return http.server.ThreadingHTTPServer((host, port), handler)


def serve(
    output_root: Path,
    start_path: PurePosixPath,
    *,
    host: str = SERVE_HOST,
    port: int = SERVE_PORT,
    echo: cabc.Callable[[str], None] = print,
) -> None:
    """Serve ``output_root`` until interrupted.

    When the server cannot start, a warning is logged and the ``file://``
    location of the start page is printed instead; this never raises.
    """
    try:
        server = create_server(output_root, host, port)
    except OSError as exc:
        logger.warning("PREVIEW_SERVER_UNAVAILABLE", host=host, port=port, error=str(exc))
        echo(f"open {file_url(output_root, start_path)}")
        return

    with server:
        echo(f"serving http://{host}:{port}/{start_path.as_posix()}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("PREVIEW_SERVER_STOPPED")


__all__ = ["create_server", "file_url", "serve"]
