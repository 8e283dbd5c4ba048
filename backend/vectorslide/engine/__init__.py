"""VectorSlide optimization profile engine."""

from vectorslide.engine.registry import rule, Stage, get_registry, load_builtin_rules
from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.profiles import OptimizationProfile, get_profile, select_profile
from vectorslide.engine.optimizer import Optimizer, optimize

__all__ = [
    "rule",
    "Stage",
    "get_registry",
    "load_builtin_rules",
    "OptimizationContext",
    "OptimizationProfile",
    "get_profile",
    "select_profile",
    "Optimizer",
    "optimize",
]
