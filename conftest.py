"""Root-level conftest.py: tests import temporal_tui from this checkout.

When temporal-tui is also installed into the environment (non-editable),
the checkout's copy must be loaded first so local changes are picked up
without reinstalling.
"""

import sys
from pathlib import Path

_checkout = str(Path(__file__).parent)
if _checkout not in sys.path:
    sys.path.insert(0, _checkout)

for _mod in list(sys.modules):
    if _mod == "temporal_tui" or _mod.startswith("temporal_tui."):
        del sys.modules[_mod]
