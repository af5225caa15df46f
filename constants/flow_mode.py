from __future__ import annotations

from enum import StrEnum


class FlowMode(StrEnum):
    SINGLE = "single"
    BULK = "bulk"
