"""
Address resolution pipeline: candidate queries, plausibility checks,
the per-record resolution loop, and postal code enrichment.
"""

from property_mapper.resolution.queries import QueryStrategyBuilder
from property_mapper.resolution.validation import PlausibilityValidator
from property_mapper.resolution.orchestrator import (
    AttemptOutcome,
    ResolutionOrchestrator,
    ResolutionReport,
    ResolutionState,
    ResolutionSummary,
)
from property_mapper.resolution.postal import PostalEnrichmentStage, PostalSummary

__all__ = [
    "QueryStrategyBuilder",
    "PlausibilityValidator",
    "AttemptOutcome",
    "ResolutionOrchestrator",
    "ResolutionReport",
    "ResolutionState",
    "ResolutionSummary",
    "PostalEnrichmentStage",
    "PostalSummary",
]
