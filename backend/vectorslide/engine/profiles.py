"""Optimization profiles — fixed rule tables keyed by profile name.

Profiles are data, not classes: each one is a precision plus an ordered
tuple of rule ids. Selection is a pure function of the markup.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class OptimizationProfile(str, enum.Enum):
    CONSERVATIVE = "conservative"
    COMPATIBLE = "compatible"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class ProfileSpec:
    profile: OptimizationProfile
    # Fractional digits kept for coordinates and numeric attributes
    precision: int
    # Strip the default "px" unit from numeric attributes
    strip_default_px: bool
    rules: tuple[str, ...]


CLEANUP_RULES = (
    "remove_doctype",
    "remove_xml_proc_inst",
    "remove_comments",
    "remove_metadata",
    "remove_editors_ns_data",
    "cleanup_attrs",
    "cleanup_numeric_values",
)

COMPATIBLE_RULES = CLEANUP_RULES + (
    "convert_colors",
    "convert_path_data",
    "convert_transform",
)

PROFILES: dict[OptimizationProfile, ProfileSpec] = {
    OptimizationProfile.CONSERVATIVE: ProfileSpec(
        profile=OptimizationProfile.CONSERVATIVE,
        precision=3,
        strip_default_px=False,
        rules=CLEANUP_RULES,
    ),
    OptimizationProfile.COMPATIBLE: ProfileSpec(
        profile=OptimizationProfile.COMPATIBLE,
        precision=2,
        strip_default_px=True,
        rules=COMPATIBLE_RULES,
    ),
    OptimizationProfile.AGGRESSIVE: ProfileSpec(
        profile=OptimizationProfile.AGGRESSIVE,
        precision=1,
        strip_default_px=True,
        rules=COMPATIBLE_RULES + ("remove_dimensions",),
    ),
}

DEFAULT_PROFILE = OptimizationProfile.COMPATIBLE

# Documents with these constructs get the compatible profile
_CLIP_PATH_RE = re.compile(r"<(?:\w+:)?clipPath\b|clip-path\s*[=:]")
_STYLE_BLOCK_RE = re.compile(r"<(?:\w+:)?style\b", re.IGNORECASE)


def get_profile(name: str | OptimizationProfile | None) -> ProfileSpec:
    """Look up a profile table; unknown or empty names get the default."""
    if isinstance(name, OptimizationProfile):
        return PROFILES[name]
    try:
        return PROFILES[OptimizationProfile((name or "").strip().lower())]
    except ValueError:
        return PROFILES[DEFAULT_PROFILE]


def select_profile(markup: str | None) -> OptimizationProfile:
    """Pick a profile from document features. Never raises."""
    if not markup or not markup.strip():
        return DEFAULT_PROFILE
    if _CLIP_PATH_RE.search(markup) or _STYLE_BLOCK_RE.search(markup):
        return OptimizationProfile.COMPATIBLE
    return OptimizationProfile.CONSERVATIVE
