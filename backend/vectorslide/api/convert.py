"""POST /api/convert — uploaded SVG/EMF files to positioned slide items."""

from __future__ import annotations

import asyncio
import functools
import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from starlette.datastructures import UploadFile

from vectorslide.config import Settings
from vectorslide.dependencies import get_settings
from vectorslide.models.document import SanitizationOptions, VectorDocument, get_canvas
from vectorslide.models.responses import ConvertResponse, SlideOut
from vectorslide.pipeline import convert_batch

router = APIRouter()
logger = logging.getLogger(__name__)


async def _read_documents(uploads: list[UploadFile], limit: int) -> list[VectorDocument]:
    documents: list[VectorDocument] = []
    for upload in uploads:
        name = upload.filename or ""
        content = await upload.read()
        if len(content) > limit:
            raise HTTPException(status_code=413, detail=f"File too large: {name}")
        try:
            documents.append(VectorDocument.from_upload(name, content))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
    return documents


@router.post("/convert", response_model=ConvertResponse)
async def convert(
    request: Request,
    filename: str | None = Query(None),
    canvas: str | None = Form(None),
    profile: str | None = Form(None),
    remove_clip_paths: bool = Form(True),
    inline_css: bool = Form(True),
    simplify_ids: bool = Form(True),
    optimize_coordinates: bool = Form(True),
    replace_non_web_fonts: bool = Form(True),
    settings: Settings = Depends(get_settings),
) -> ConvertResponse:
    # File parts count whatever their field name (file_0, file_1, ...)
    form = await request.form()
    uploads = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
    if not uploads:
        raise HTTPException(status_code=400, detail="No files uploaded")

    documents = await _read_documents(uploads, settings.max_upload_bytes)
    options = SanitizationOptions(
        remove_clip_paths=remove_clip_paths,
        inline_css=inline_css,
        simplify_ids=simplify_ids,
        optimize_coordinates=optimize_coordinates,
        replace_non_web_fonts=replace_non_web_fonts,
    )
    target = get_canvas(canvas or settings.default_canvas)

    logger.info("Converting %d file(s) onto %s canvas", len(documents), target.name)
    # Batch runs in a thread so the event loop stays free
    slides = await asyncio.get_running_loop().run_in_executor(
        None,
        functools.partial(
            convert_batch,
            documents,
            options,
            target,
            profile or settings.default_profile,
            settings.max_workers,
            settings.document_timeout_s,
        ),
    )

    return ConvertResponse(
        filename=filename or settings.output_basename,
        canvas=target.name,
        slides=[SlideOut.from_item(item) for item in slides],
    )
