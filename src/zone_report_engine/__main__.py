"""Module entrypoint.

Allows:
    python -m zone_report_engine
"""

from __future__ import annotations

from zone_report_engine.server.result_server import main

if __name__ == "__main__":
    main()
