"""Binary vector passthrough: EMF payloads are embedded without re-encoding."""

from __future__ import annotations

import base64
import logging
import struct

from vectorslide.errors import EncodingFailed
from vectorslide.models.document import (
    DEFAULT_INTRINSIC_HEIGHT,
    DEFAULT_INTRINSIC_WIDTH,
    EMF_MEDIA_TYPE,
    SVG_MEDIA_TYPE,
    BinaryPassthrough,
    DocumentKind,
)
from vectorslide.svg.parser import UNITS_TO_PX
from vectorslide.svg.placeholder import PLACEHOLDER_HEIGHT, PLACEHOLDER_WIDTH, placeholder_svg

logger = logging.getLogger(__name__)

# EMR_HEADER: iType, nSize, rclBounds (4 x int32), rclFrame (4 x int32), dSignature
_EMR_HEADER = 1
_EMF_SIGNATURE = b" EMF"
_HEADER_LEN = 44
# rclFrame is in 0.01 mm
_FRAME_UNIT_TO_PX = UNITS_TO_PX["mm"] / 100


def emf_frame_size(data: bytes) -> tuple[float, float] | None:
    """Picture frame size in px from an EMF header, or None if unreadable."""
    if len(data) < _HEADER_LEN or data[40:44] != _EMF_SIGNATURE:
        return None
    record_type, _ = struct.unpack_from("<II", data, 0)
    if record_type != _EMR_HEADER:
        return None
    left, top, right, bottom = struct.unpack_from("<4i", data, 24)
    width = (right - left) * _FRAME_UNIT_TO_PX
    height = (bottom - top) * _FRAME_UNIT_TO_PX
    if width <= 0 or height <= 0:
        return None
    return width, height


def _encode(data: bytes) -> BinaryPassthrough:
    if not isinstance(data, (bytes, bytearray)) or not data:
        raise EncodingFailed("Empty or non-binary payload")
    try:
        encoded = base64.b64encode(bytes(data)).decode("ascii")
    except (TypeError, ValueError) as e:
        raise EncodingFailed(str(e)) from e

    size = emf_frame_size(bytes(data))
    if size is None:
        logger.warning("EMF header frame unreadable, using default size")
        size = (DEFAULT_INTRINSIC_WIDTH, DEFAULT_INTRINSIC_HEIGHT)

    return BinaryPassthrough(
        data_uri=f"data:{EMF_MEDIA_TYPE};base64,{encoded}",
        intrinsic_width=size[0],
        intrinsic_height=size[1],
    )


def encode_binary(data: bytes) -> BinaryPassthrough:
    """Embed an EMF payload as a data URI; a placeholder SVG stands in on failure."""
    try:
        return _encode(data)
    except EncodingFailed as e:
        logger.warning("EMF passthrough failed: %s", e)
        markup = placeholder_svg(str(e), title="EMF Processing Error")
        encoded = base64.b64encode(markup.encode("utf-8")).decode("ascii")
        return BinaryPassthrough(
            data_uri=f"data:{SVG_MEDIA_TYPE};base64,{encoded}",
            media_type=SVG_MEDIA_TYPE,
            kind=DocumentKind.MARKUP,
            intrinsic_width=PLACEHOLDER_WIDTH,
            intrinsic_height=PLACEHOLDER_HEIGHT,
        )
