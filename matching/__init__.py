#Expose the high-level pipeline pieces:
#Request validation
#Route summaries for the ranking consumer
#Matcher orchestrator (the "one call" entry point)

from .matcher import (
    JourneyRequest,
    LegSummary,
    MatchResult,
    RouteSummary,
    extract_operator,
    format_duration,
    format_time,
    match_journey,
)

__all__ = [
    "JourneyRequest",
    "LegSummary",
    "MatchResult",
    "RouteSummary",
    "extract_operator",
    "format_duration",
    "format_time",
    "match_journey",
]
