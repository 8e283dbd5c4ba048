"""Error kinds raised inside the conversion pipeline.

None of these ever reach the HTTP caller: each one is recovered by the
component boundary that owns it (see the pipeline orchestrator).
"""

from __future__ import annotations


class VectorSlideError(Exception):
    """Base class for pipeline errors."""


class MalformedDocument(VectorSlideError):
    """Input cannot be parsed as the declared document kind."""


class OptimizationFailed(VectorSlideError):
    """An optimization rule raised; the caller keeps the unoptimized markup."""

    def __init__(self, rule_id: str, cause: Exception) -> None:
        super().__init__(f"{rule_id}: {cause}")
        self.rule_id = rule_id
        self.cause = cause


class EncodingFailed(VectorSlideError):
    """Binary passthrough could not encode the payload."""
