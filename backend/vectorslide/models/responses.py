"""API response models."""

from __future__ import annotations

from pydantic import BaseModel

from vectorslide.models.document import NormalizedDocument, SlideItem


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    rules_registered: int = 0


class PlacementOut(BaseModel):
    x: float
    y: float
    w: float
    h: float


class SlideOut(BaseModel):
    index: int
    filename: str
    kind: str
    media_type: str
    data_uri: str
    markup: str | None = None
    profile: str | None = None
    placeholder: bool = False
    placement: PlacementOut

    @classmethod
    def from_item(cls, item: SlideItem) -> SlideOut:
        doc = item.document
        is_markup = isinstance(doc, NormalizedDocument)
        return cls(
            index=item.index,
            filename=item.filename,
            kind=doc.kind.value,
            media_type=doc.media_type,
            data_uri=doc.data_uri() if is_markup else doc.data_uri,
            markup=doc.markup if is_markup else None,
            profile=doc.profile if is_markup else None,
            placeholder=doc.placeholder if is_markup else False,
            placement=PlacementOut(**item.placement.model_dump()),
        )


class ConvertResponse(BaseModel):
    filename: str
    canvas: str
    slides: list[SlideOut]
