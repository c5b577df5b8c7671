"""Flask application factory for the sectorfs web UI.

The ``create_app`` function builds a filesystem, creates a shell, and
returns a Flask app with three endpoints:

- ``GET /``: render the terminal HTML page.
- ``POST /api/execute``: execute a command and return JSON.
- ``GET /api/status``: return disk usage and the sector map.
"""

from __future__ import annotations

import dataclasses

from flask import Flask, Response, jsonify, render_template, request

from sectorfs.config import DiskConfig
from sectorfs.filesystem import FileSystem
from sectorfs.shell import Shell

_HTTP_BAD_REQUEST = 400
_DEFAULT_SECTORS = 128


def create_app(config: DiskConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Build a filesystem, create a shell, and wire up routes.  ``get`` and
    ``put`` touch the server's working directory, exactly as in the REPL.

    Args:
        config: Disk geometry (128 sectors of the default size if omitted).

    Returns:
        A configured Flask application ready to serve.

    """
    config = config if config is not None else DiskConfig(total_sectors=_DEFAULT_SECTORS)
    fs = FileSystem(config)
    shell = Shell(session=fs.open_session())
    halted = False

    app = Flask(__name__)

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the terminal HTML page."""
        return render_template(
            "index.html",
            total_sectors=config.total_sectors,
            sector_size=config.sector_size,
        )

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output`` and ``halted`` fields.

        """
        nonlocal halted
        data = request.get_json(silent=True)
        if data is None or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        if halted:
            return jsonify({"output": "Session closed.", "halted": True})

        command: str = data["command"]
        result = shell.execute(command)
        if result == Shell.EXIT_SENTINEL:
            halted = True
            return jsonify({"output": "Session closed.", "halted": True})

        return jsonify({"output": result, "halted": False})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return disk usage and sector ownership for status polling.

        Returns:
            JSON with ``status``, ``sector_map`` and ``cwd`` fields.

        """
        return jsonify(
            {
                "status": dataclasses.asdict(fs.status()),
                "sector_map": fs.sector_map(),
                "cwd": shell.session.pwd(),
            }
        )

    return app


def main() -> None:
    """Run the web UI development server.

    This is the ``sectorfs-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
