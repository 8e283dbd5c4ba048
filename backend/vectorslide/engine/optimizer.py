"""Optimizer — runs one profile's rules over normalized markup, best-effort."""

from __future__ import annotations

import logging
import time

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.profiles import OptimizationProfile, get_profile
from vectorslide.engine.registry import RuleRegistry, load_builtin_rules
from vectorslide.errors import MalformedDocument, OptimizationFailed
from vectorslide.svg.parser import parse_markup, serialize

logger = logging.getLogger(__name__)


class Optimizer:
    """Applies an optimization profile; never makes a document worse than its input."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry or load_builtin_rules()

    def run(self, markup: str, profile: OptimizationProfile | str | None = None) -> OptimizationContext:
        """Optimize ``markup``. On any failure ``ctx.output`` is ``markup`` unchanged."""
        ctx = OptimizationContext(source=markup, spec=get_profile(profile))
        start = time.perf_counter()
        try:
            self._apply(ctx)
        except OptimizationFailed as e:
            ctx.error = str(e)
            ctx.output = markup
            logger.warning("Optimization (%s) failed, keeping normalized markup: %s", ctx.profile.value, e)
            return ctx

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            "Optimization (%s): %d rules in %.1fms, %d → %d chars",
            ctx.profile.value,
            len(ctx.completed_rules),
            elapsed,
            len(markup),
            len(ctx.output),
        )
        return ctx

    def _apply(self, ctx: OptimizationContext) -> None:
        try:
            ordered = self.registry.resolve_order(ctx.spec.rules)
            ctx.root = parse_markup(ctx.source)
        except (KeyError, MalformedDocument) as e:
            raise OptimizationFailed("setup", e) from e

        for spec in ordered:
            try:
                changed = spec.fn(ctx)
            except Exception as e:
                raise OptimizationFailed(spec.id, e) from e
            ctx.completed_rules.append(spec.id)
            if changed:
                ctx.changes[spec.id] = changed

        output = serialize(ctx.root)
        # Output must re-parse
        try:
            parse_markup(output)
        except MalformedDocument as e:
            raise OptimizationFailed("verify", e) from e
        ctx.output = output


_default_optimizer: Optimizer | None = None


def optimize(markup: str, profile: OptimizationProfile | str | None = None) -> OptimizationContext:
    """Module-level convenience wrapper around a shared Optimizer."""
    global _default_optimizer
    if _default_optimizer is None:
        _default_optimizer = Optimizer()
    return _default_optimizer.run(markup, profile)
