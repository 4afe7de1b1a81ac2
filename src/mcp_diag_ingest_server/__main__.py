"""Module entrypoint.

Allows:
    python -m mcp_diag_ingest_server
"""

from __future__ import annotations

from mcp_diag_ingest_server.server.diag_server import main

if __name__ == "__main__":
    main()
