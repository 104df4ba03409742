"""Progress callback signature shared by stage ports."""
from __future__ import annotations
from typing import Callable

# Receives a percentage in 0..100.
ProgressCallback = Callable[[int], None]
