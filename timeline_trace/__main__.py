"""Module entry point: python -m timeline_trace ..."""

from __future__ import annotations

from timeline_trace.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
