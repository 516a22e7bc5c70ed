"""
Root conftest.

Puts ``src`` (the package) and ``tests`` (the shared ``fixtures`` package)
on sys.path so the suite runs from a plain checkout.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).parent

for path in (ROOT / "src", ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
