"""Shared constants for the OrientedBoundingBox wire layout."""

import os
from enum import StrEnum

SKIP_VALIDATION = os.getenv("SKIP_VALIDATION", "0") == "1"


class ObbField(StrEnum):
    TX = "tx"
    TY = "ty"
    TZ = "tz"
    QW = "qw"
    QX = "qx"
    QY = "qy"
    QZ = "qz"
    WIDTH = "width"
    HEIGHT = "height"
    DEPTH = "depth"


SERIALIZED_LENGTH = len(ObbField)
