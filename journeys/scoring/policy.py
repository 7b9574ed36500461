"""
Purpose: Central configuration for corridor scoring (single source of truth).
What it does:

Stores all tunable weights/knobs:

DETOUR_WEIGHT = 0.5 (fraction of journey time charged per unit of excess detour ratio)

TRANSFER_PENALTY_MIN = 10 (minutes per interchange)

DETOUR_THRESHOLD = 1.0 (ratio below which no detour penalty applies)

Defines a ScoringPolicy object that is passed explicitly into the scorer,
so scoring stays reproducible and can be tested with varied weightings.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Central configuration for corridor scoring.

    Scoring formula (all terms in minutes):
        score = duration
              + max(0, detour_ratio - detour_threshold) * duration * detour_weight
              + transfer_count * per_transfer_penalty_minutes
    """

    # --- Detour penalty ---
    # Share of the journey duration charged per 1.0 of excess detour ratio.
    detour_weight: float = 0.5

    # Routes up to this ratio (route km / straight-line km) carry no penalty.
    detour_threshold: float = 1.0

    # --- Transfer penalty ---
    # Added risk/inconvenience of each interchange.
    per_transfer_penalty_minutes: float = 10.0

    # --- Transfer counting ---
    # If True: consecutive legs on the same trip (same vehicle) are not a transfer.
    # Off by default: every leg boundary counts as one interchange.
    merge_same_trip: bool = False

    # --- Validation ---
    # If True: legs that overlap in time fail with InvalidItineraryOrderingError.
    # If False: the overlap is logged and the itinerary is still scored.
    strict_ordering: bool = False

    # --- Batch fan-out ---
    # Thread pool size for batch scoring. 1 scores inline.
    max_workers: int = 4

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.detour_weight < 0:
            raise ValueError("detour_weight must be >= 0")

        if self.detour_threshold < 1.0:
            raise ValueError("detour_threshold must be >= 1.0")

        if self.per_transfer_penalty_minutes < 0:
            raise ValueError("per_transfer_penalty_minutes must be >= 0")

        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    def with_overrides(self, **changes) -> ScoringPolicy:
        """
        Per-corridor / per-deployment override, e.g.
            policy.with_overrides(per_transfer_penalty_minutes=5)
        """
        p = replace(self, **changes)
        p.validate()
        return p


def default_policy() -> ScoringPolicy:
    """
    Convenience factory for the default policy.
    """
    p = ScoringPolicy()
    p.validate()
    return p


def research_policy() -> ScoringPolicy:
    """
    Borrows two constants from the first deployment of the journey matcher:
    a 20% detour allowance and a 15 minute interchange penalty
    (mid-range of the 8-18 min figures in UK rail research).

    The detour charge itself stays proportional to journey time
    (detour_weight x duration). That deployment charged a flat 20 minutes
    per unit of excess ratio instead, so scores are not directly comparable.
    """
    p = ScoringPolicy(
        detour_threshold=1.2,
        per_transfer_penalty_minutes=15.0,
    )
    p.validate()
    return p


def policy_from_env() -> ScoringPolicy:
    """
    Deployment override: read weights from the environment (or .env).

    Example in .env:
    DETOUR_WEIGHT=0.5
    TRANSFER_PENALTY_MIN=10
    DETOUR_THRESHOLD=1.0
    SCORING_MAX_WORKERS=4
    """
    load_dotenv()
    base = ScoringPolicy()

    p = ScoringPolicy(
        detour_weight=float(os.getenv("DETOUR_WEIGHT", base.detour_weight)),
        detour_threshold=float(os.getenv("DETOUR_THRESHOLD", base.detour_threshold)),
        per_transfer_penalty_minutes=float(
            os.getenv("TRANSFER_PENALTY_MIN", base.per_transfer_penalty_minutes)
        ),
        merge_same_trip=os.getenv("MERGE_SAME_TRIP", "false").lower() in ("1", "true", "yes"),
        strict_ordering=os.getenv("STRICT_LEG_ORDERING", "false").lower() in ("1", "true", "yes"),
        max_workers=int(os.getenv("SCORING_MAX_WORKERS", base.max_workers)),
    )
    p.validate()
    return p
