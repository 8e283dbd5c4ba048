"""Tests for the optimizer run loop and its fallback."""

from __future__ import annotations

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.optimizer import Optimizer, optimize
from vectorslide.engine.profiles import OptimizationProfile
from vectorslide.engine.registry import RuleRegistry, RuleSpec, Stage, load_builtin_rules
from vectorslide.svg.parser import parse_markup
from tests.conftest import NOISY_SVG, SIMPLE_SVG


def _boom(ctx: OptimizationContext) -> int:
    raise RuntimeError("boom")


def _registry_with_failing(rule_id: str) -> RuleRegistry:
    reg = RuleRegistry()
    for spec in load_builtin_rules().all():
        if spec.id == rule_id:
            spec = RuleSpec(id=spec.id, stage=spec.stage, fn=_boom)
        reg.register(spec)
    return reg


def test_run_records_completed_rules():
    ctx = optimize(NOISY_SVG, OptimizationProfile.COMPATIBLE)
    assert not ctx.fell_back
    assert ctx.completed_rules[0] == "remove_doctype"
    assert "convert_path_data" in ctx.completed_rules
    assert ctx.changes["convert_path_data"] == 1


def test_output_reparses_and_keeps_namespace_first():
    ctx = optimize(NOISY_SVG, "aggressive")
    parse_markup(ctx.output)
    assert ctx.output.startswith('<svg xmlns="http://www.w3.org/2000/svg"')


def test_failing_rule_falls_back_to_input():
    optimizer = Optimizer(registry=_registry_with_failing("convert_colors"))
    ctx = optimizer.run(NOISY_SVG, OptimizationProfile.COMPATIBLE)
    assert ctx.fell_back
    assert ctx.output == NOISY_SVG
    assert ctx.error.startswith("convert_colors:")


def test_failing_rule_outside_profile_is_not_run():
    optimizer = Optimizer(registry=_registry_with_failing("remove_dimensions"))
    ctx = optimizer.run(SIMPLE_SVG, OptimizationProfile.COMPATIBLE)
    assert not ctx.fell_back


def test_unknown_rules_fall_back():
    ctx = Optimizer(registry=RuleRegistry()).run(SIMPLE_SVG, "conservative")
    assert ctx.fell_back
    assert ctx.output == SIMPLE_SVG


def test_unparseable_input_falls_back():
    ctx = optimize("<svg", "compatible")
    assert ctx.fell_back
    assert ctx.output == "<svg"


def test_unknown_profile_name_uses_default():
    ctx = optimize(SIMPLE_SVG, "no-such-profile")
    assert ctx.profile == OptimizationProfile.COMPATIBLE
