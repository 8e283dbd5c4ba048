"""Document, canvas and placement models shared by every pipeline stage."""

from __future__ import annotations

import base64
import enum

from pydantic import BaseModel, Field

SVG_MEDIA_TYPE = "image/svg+xml"
EMF_MEDIA_TYPE = "image/x-emf"

# Fallback intrinsic size when a document carries no usable size metadata.
DEFAULT_INTRINSIC_WIDTH = 576.0
DEFAULT_INTRINSIC_HEIGHT = 432.0


class DocumentKind(str, enum.Enum):
    MARKUP = "markup"
    OPAQUE_BINARY = "opaque-binary"


_EXTENSION_KINDS = {
    "svg": DocumentKind.MARKUP,
    "emf": DocumentKind.OPAQUE_BINARY,
}


def kind_for_extension(extension: str) -> DocumentKind | None:
    """Map a file extension (with or without the dot) to a document kind."""
    return _EXTENSION_KINDS.get(extension.lower().lstrip("."))


class VectorDocument(BaseModel):
    """One uploaded file, as received."""

    model_config = {"frozen": True}

    filename: str
    content: bytes
    kind: DocumentKind

    @classmethod
    def from_upload(cls, filename: str, content: bytes, extension: str | None = None) -> VectorDocument:
        if extension is None:
            extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        kind = kind_for_extension(extension)
        if kind is None:
            raise ValueError(f"Unsupported file type: {filename!r}")
        return cls(filename=filename, content=content, kind=kind)


class SanitizationOptions(BaseModel):
    """Flags for the structural normalizer. Every step is on by default."""

    model_config = {"frozen": True, "populate_by_name": True}

    remove_clip_paths: bool = Field(default=True, alias="removeClipPaths")
    inline_css: bool = Field(default=True, alias="inlineCss")
    simplify_ids: bool = Field(default=True, alias="simplifyIds")
    optimize_coordinates: bool = Field(default=True, alias="optimizeCoordinates")
    replace_non_web_fonts: bool = Field(default=True, alias="replaceNonWebFonts")


class NormalizedDocument(BaseModel):
    """Sanitized, optimized SVG markup plus its derived size metadata."""

    model_config = {"frozen": True}

    markup: str
    intrinsic_width: float = DEFAULT_INTRINSIC_WIDTH
    intrinsic_height: float = DEFAULT_INTRINSIC_HEIGHT
    profile: str | None = None
    placeholder: bool = False

    @property
    def aspect_ratio(self) -> float:
        return self.intrinsic_width / self.intrinsic_height

    @property
    def media_type(self) -> str:
        return SVG_MEDIA_TYPE

    @property
    def kind(self) -> DocumentKind:
        return DocumentKind.MARKUP

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.markup.encode("utf-8")).decode("ascii")
        return f"data:{SVG_MEDIA_TYPE};base64,{encoded}"


class BinaryPassthrough(BaseModel):
    """An EMF payload embedded as-is, or the placeholder that replaced it."""

    model_config = {"frozen": True}

    data_uri: str
    media_type: str = EMF_MEDIA_TYPE
    kind: DocumentKind = DocumentKind.OPAQUE_BINARY
    intrinsic_width: float = DEFAULT_INTRINSIC_WIDTH
    intrinsic_height: float = DEFAULT_INTRINSIC_HEIGHT

    @property
    def aspect_ratio(self) -> float:
        return self.intrinsic_width / self.intrinsic_height


class Canvas(BaseModel):
    """Target slide page, in inches."""

    model_config = {"frozen": True}

    name: str = "custom"
    width: float
    height: float
    margin: float = 0.5

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.height - 2 * self.margin


WIDESCREEN = Canvas(name="widescreen", width=10.0, height=5.625, margin=0.5)
STANDARD = Canvas(name="standard", width=10.0, height=7.5, margin=0.5)

CANVASES: dict[str, Canvas] = {c.name: c for c in (WIDESCREEN, STANDARD)}


def get_canvas(name: str | None) -> Canvas:
    """Look up a canvas preset by name; unknown or empty names get widescreen."""
    if not name:
        return WIDESCREEN
    return CANVASES.get(name.lower(), WIDESCREEN)


class PlacementRect(BaseModel):
    """Where the graphic goes on the canvas (same units as the canvas)."""

    model_config = {"frozen": True}

    x: float
    y: float
    w: float
    h: float


class SlideItem(BaseModel):
    """One output slide: the document to embed and where to put it."""

    index: int
    filename: str
    document: NormalizedDocument | BinaryPassthrough
    placement: PlacementRect
