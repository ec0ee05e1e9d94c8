#!/usr/bin/env python3
"""Top-level runner.

Run:
  python generate_hl7.py --n 10 --out out --per-message

Assumes this file is at repo root next to the `hl7seg/` package.
"""

from __future__ import annotations

import os
import sys

# Ensure repo root is on sys.path so `hl7seg` is importable from a checkout
ROOT = os.path.dirname(os.path.abspath(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hl7seg.run_pipeline import main

if __name__ == "__main__":
    raise SystemExit(main())
