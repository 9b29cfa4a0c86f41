#!/usr/bin/env python3
"""Entry-point shim for frozen Gellyscope builds."""

from __future__ import annotations

from gellyscope.app import main


if __name__ == "__main__":
    raise SystemExit(main())
