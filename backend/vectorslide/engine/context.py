"""OptimizationContext — the mutable state one optimization run works on."""

from __future__ import annotations

from dataclasses import dataclass, field

from lxml import etree

from vectorslide.engine.profiles import OptimizationProfile, ProfileSpec


@dataclass
class OptimizationContext:
    """State flowing through the rules of one profile for one document."""

    # Markup as handed over by the normalizer; returned untouched on failure
    source: str
    spec: ProfileSpec
    # Parsed tree the rules mutate
    root: etree._Element | None = None
    # Final markup (source when the run fell back)
    output: str = ""

    # --- Run metadata ---
    completed_rules: list[str] = field(default_factory=list)
    changes: dict[str, int] = field(default_factory=dict)
    error: str = ""

    @property
    def profile(self) -> OptimizationProfile:
        return self.spec.profile

    @property
    def precision(self) -> int:
        return self.spec.precision

    @property
    def fell_back(self) -> bool:
        return bool(self.error)
