"""Browser-based web UI for the filesystem simulator.

This package provides a Flask application that exposes the shell and
the sector map through a web browser.  It is an **optional** extra;
install with::

    pip install sectorfs[web]

The ``create_app`` factory in ``app.py`` builds a filesystem, creates a
shell, and serves three endpoints:

- ``GET /``: HTML terminal page.
- ``POST /api/execute``: execute a shell command and return JSON.
- ``GET /api/status``: disk usage and sector map for live polling.
"""
