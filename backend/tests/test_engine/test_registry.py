"""Tests for the rule registry."""

import pytest

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import RuleRegistry, RuleSpec, Stage, get_registry, load_builtin_rules


def _noop(ctx: OptimizationContext) -> int:
    return 0


def test_register_and_get():
    reg = RuleRegistry()
    spec = RuleSpec(id="remove_comments", stage=Stage.CLEANUP, fn=_noop)
    reg.register(spec)
    assert reg.get("remove_comments") is spec
    assert reg.count == 1


def test_duplicate_id_rejected():
    reg = RuleRegistry()
    reg.register(RuleSpec(id="a", stage=Stage.CLEANUP, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(RuleSpec(id="a", stage=Stage.COLORS, fn=_noop))


def test_get_stage():
    reg = RuleRegistry()
    reg.register(RuleSpec(id="c", stage=Stage.CLEANUP, fn=_noop))
    reg.register(RuleSpec(id="g", stage=Stage.GEOMETRY, fn=_noop))
    geometry = reg.get_stage(Stage.GEOMETRY)
    assert [s.id for s in geometry] == ["g"]


def test_resolve_order_by_stage_then_table_position():
    reg = RuleRegistry()
    reg.register(RuleSpec(id="dims", stage=Stage.DIMENSIONS, fn=_noop))
    reg.register(RuleSpec(id="zeta", stage=Stage.CLEANUP, fn=_noop))
    reg.register(RuleSpec(id="alpha", stage=Stage.CLEANUP, fn=_noop))
    reg.register(RuleSpec(id="colors", stage=Stage.COLORS, fn=_noop))
    order = reg.resolve_order(("dims", "colors", "zeta", "alpha"))
    assert [s.id for s in order] == ["zeta", "alpha", "colors", "dims"]


def test_resolve_order_unknown_rule():
    reg = RuleRegistry()
    with pytest.raises(KeyError):
        reg.resolve_order(["missing"])


def test_builtin_rules_registered():
    reg = load_builtin_rules()
    assert reg is get_registry()
    ids = {s.id for s in reg.all()}
    assert {
        "remove_doctype",
        "remove_xml_proc_inst",
        "remove_comments",
        "remove_metadata",
        "remove_editors_ns_data",
        "cleanup_attrs",
        "cleanup_numeric_values",
        "convert_colors",
        "convert_path_data",
        "convert_transform",
        "remove_dimensions",
    } <= ids


def test_builtin_loading_is_repeatable():
    first = load_builtin_rules().count
    assert load_builtin_rules().count == first
