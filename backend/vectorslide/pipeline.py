"""Pipeline orchestrator: one uploaded file in, one slide item out.

Markup goes through security filter → structural normalizer → optimization
profile, opaque binaries through the passthrough encoder, and both end in
the layout fitter. Every document yields exactly one slide; failures are
recovered here and never abort a batch.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from vectorslide.config import settings
from vectorslide.engine.optimizer import optimize
from vectorslide.engine.profiles import OptimizationProfile, get_profile, select_profile
from vectorslide.errors import MalformedDocument
from vectorslide.layout.fitter import fit_document, intrinsic_size
from vectorslide.models.document import (
    WIDESCREEN,
    Canvas,
    DocumentKind,
    NormalizedDocument,
    SanitizationOptions,
    SlideItem,
    VectorDocument,
)
from vectorslide.passthrough.binary import encode_binary
from vectorslide.svg.normalizer import normalize_markup
from vectorslide.svg.placeholder import PLACEHOLDER_HEIGHT, PLACEHOLDER_WIDTH, placeholder_svg
from vectorslide.svg.security import sanitize_markup

logger = logging.getLogger(__name__)


def decode_markup(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"Not UTF-8 text: {e.reason}") from e


def placeholder_document(message: str = "") -> NormalizedDocument:
    return NormalizedDocument(
        markup=placeholder_svg(message),
        intrinsic_width=PLACEHOLDER_WIDTH,
        intrinsic_height=PLACEHOLDER_HEIGHT,
        placeholder=True,
    )


def process_markup(
    markup: str,
    options: SanitizationOptions | None = None,
    profile: OptimizationProfile | str | None = None,
) -> NormalizedDocument:
    """Sanitize, normalize and optimize one SVG. Raises MalformedDocument."""
    options = options or SanitizationOptions()
    safe = sanitize_markup(markup)
    normalized = normalize_markup(safe, options)

    # Selection looks at the input as uploaded, before styles are inlined
    chosen = get_profile(profile).profile if profile else select_profile(markup)
    ctx = optimize(normalized, chosen)

    width, height = intrinsic_size(ctx.output)
    return NormalizedDocument(
        markup=ctx.output,
        intrinsic_width=width,
        intrinsic_height=height,
        profile=None if ctx.fell_back else ctx.profile.value,
    )


def process_document(
    document: VectorDocument,
    options: SanitizationOptions | None = None,
    canvas: Canvas = WIDESCREEN,
    profile: OptimizationProfile | str | None = None,
    index: int = 0,
) -> SlideItem:
    """Turn one uploaded file into a positioned slide item."""
    start = time.perf_counter()
    if document.kind == DocumentKind.OPAQUE_BINARY:
        result = encode_binary(document.content)
    else:
        try:
            result = process_markup(decode_markup(document.content), options, profile)
        except MalformedDocument as e:
            logger.warning("%s: malformed markup, using placeholder: %s", document.filename, e)
            result = placeholder_document(str(e))

    placement = fit_document(result, canvas)
    logger.info(
        "%s: %s processed in %.1fms",
        document.filename,
        document.kind.value,
        (time.perf_counter() - start) * 1000,
    )
    return SlideItem(index=index, filename=document.filename, document=result, placement=placement)


def convert_batch(
    documents: list[VectorDocument],
    options: SanitizationOptions | None = None,
    canvas: Canvas = WIDESCREEN,
    profile: OptimizationProfile | str | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> list[SlideItem]:
    """Process documents in parallel; slides come back in input order."""
    if not documents:
        return []
    max_workers = max_workers or settings.max_workers
    timeout = timeout if timeout is not None else settings.document_timeout_s

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vectorslide")
    try:
        futures = [
            executor.submit(process_document, doc, options, canvas, profile, i)
            for i, doc in enumerate(documents)
        ]
        slides: list[SlideItem] = []
        for i, (doc, future) in enumerate(zip(documents, futures)):
            try:
                slides.append(future.result(timeout=timeout))
                continue
            except FutureTimeout:
                logger.warning("%s: timed out after %.1fs, using placeholder", doc.filename, timeout)
                result = placeholder_document("Processing timed out")
            except Exception as e:
                logger.warning("%s: processing failed, using placeholder: %s", doc.filename, e)
                result = placeholder_document(str(e))
            slides.append(
                SlideItem(index=i, filename=doc.filename, document=result, placement=fit_document(result, canvas))
            )
        return slides
    finally:
        # Timed-out workers finish in the background
        executor.shutdown(wait=False, cancel_futures=True)
