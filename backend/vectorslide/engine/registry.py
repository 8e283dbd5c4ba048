"""Rule registry — every optimization rule is a standalone function registered via decorator.

Usage:
    @rule(id="remove_comments", stage=Stage.CLEANUP, description="Drop XML comments")
    def remove_comments(ctx: OptimizationContext) -> int:
        ...

Adding a new rule = creating one function with the decorator and listing its
id in a profile table. Nothing else changes.
"""

from __future__ import annotations

import enum
import importlib
import logging
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from vectorslide.engine.context import OptimizationContext

logger = logging.getLogger(__name__)

RuleFn = Callable[["OptimizationContext"], "int | None"]


class Stage(enum.IntEnum):
    CLEANUP = 0
    NUMERIC = 1
    COLORS = 2
    GEOMETRY = 3
    DIMENSIONS = 4


@dataclass
class RuleSpec:
    id: str
    stage: Stage
    fn: RuleFn
    description: str = ""


class RuleRegistry:
    """Registry of optimization rules."""

    def __init__(self) -> None:
        self._rules: dict[str, RuleSpec] = {}

    def register(self, spec: RuleSpec) -> None:
        if spec.id in self._rules:
            raise ValueError(f"Duplicate rule ID: {spec.id}")
        self._rules[spec.id] = spec
        logger.debug("Registered rule %s (%s)", spec.id, spec.stage.name)

    def get(self, rule_id: str) -> RuleSpec:
        return self._rules[rule_id]

    def get_stage(self, stage: Stage) -> list[RuleSpec]:
        specs = [s for s in self._rules.values() if s.stage == stage]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[RuleSpec]:
        return sorted(self._rules.values(), key=lambda s: (s.stage, s.id))

    def resolve_order(self, rule_ids: tuple[str, ...] | list[str]) -> list[RuleSpec]:
        """Order the requested rules by stage, keeping table order within a stage."""
        missing = [rid for rid in rule_ids if rid not in self._rules]
        if missing:
            raise KeyError(f"Unknown rules: {missing}")
        position = {rid: i for i, rid in enumerate(rule_ids)}
        specs = [self._rules[rid] for rid in rule_ids]
        return sorted(specs, key=lambda s: (s.stage, position[s.id]))

    @property
    def count(self) -> int:
        return len(self._rules)


# Module-level singleton
_registry = RuleRegistry()


def get_registry() -> RuleRegistry:
    return _registry


def rule(*, id: str, stage: Stage, description: str = ""):
    """Decorator to register a rule function."""

    def decorator(fn: RuleFn):
        _registry.register(RuleSpec(id=id, stage=stage, fn=fn, description=description))
        return fn

    return decorator


def load_builtin_rules() -> RuleRegistry:
    """Import every module under ``vectorslide.engine.rules`` so @rule decorators fire."""
    package = importlib.import_module("vectorslide.engine.rules")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{package.__name__}.{module_name}")
    return _registry
