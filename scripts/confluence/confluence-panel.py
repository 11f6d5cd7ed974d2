#!/usr/bin/env python3
"""Thin entrypoint for the Confluence global panel."""

from __future__ import annotations

from km_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
