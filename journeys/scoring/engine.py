"""
Purpose: The batch scoring "orchestrator" (single entry point).
What it does:

Coordinates the pipeline end-to-end for one ranking request:

- takes the candidate itineraries (strict Itinerary values or raw planner dicts)

- validates origin/destination once (request-level)

- fans out: scores every itinerary independently (scorer.py)

- fans in: partitions outcomes into scored routes and per-itinerary failures

- ranks the scored routes (ranking.py)

Typical public function signature:

- score_batch(itineraries, origin, destination, policy=...) -> BatchScoreResult
  where BatchScoreResult contains:

- ranked: List[ScoredRoute]

- failures: List[ScoringFailure]

Rule: Engine is the only file other modules should call directly for batch scoring.
"""

# journeys/scoring/engine.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from ..errors import RouteScoringError
from ..geometry import Coordinates, validate_coordinates
from ..models import Itinerary
from .policy import ScoringPolicy, default_policy
from .ranking import rank_routes
from .scorer import ScoredRoute, score_itinerary

logger = logging.getLogger(__name__)

ItineraryInput = Union[Itinerary, dict]


@dataclass(frozen=True)
class ScoringFailure:
    """
    One itinerary that could not be evaluated.
    """
    index: int
    source: Any
    error: RouteScoringError

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class ScoringOutcome:
    """
    Result of scoring one itinerary: exactly one of route / failure is set.
    """
    route: Optional[ScoredRoute] = None
    failure: Optional[ScoringFailure] = None

    @property
    def ok(self) -> bool:
        return self.route is not None


@dataclass(frozen=True)
class BatchScoreResult:
    """
    Output of a batch scoring run: a partial ranked list plus the failures.
    """
    ranked: List[ScoredRoute]
    failures: List[ScoringFailure]

    @property
    def total(self) -> int:
        return len(self.ranked) + len(self.failures)

    def summary(self) -> str:
        if not self.failures:
            return f"All {self.total} routes evaluated"
        return f"{len(self.failures)} of {self.total} routes could not be evaluated"


def score_one(
    index: int,
    item: ItineraryInput,
    origin: Coordinates,
    destination: Coordinates,
    *,
    policy: ScoringPolicy,
    corridor_id: Optional[str] = None,
) -> ScoringOutcome:
    """
    Parse (if needed) and score one itinerary, turning a scoring error into
    a failure value instead of letting it cross the batch boundary.
    """
    try:
        itinerary = item if isinstance(item, Itinerary) else Itinerary.from_otp(item)
        score = score_itinerary(
            itinerary,
            origin,
            destination,
            corridor_id=corridor_id,
            policy=policy,
        )
    except RouteScoringError as e:
        logger.warning("Itinerary %d could not be scored (%s): %s", index, e.kind, e)
        return ScoringOutcome(failure=ScoringFailure(index=index, source=item, error=e))

    return ScoringOutcome(route=ScoredRoute(itinerary=itinerary, corridor_score=score, index=index))


def score_batch(
    itineraries: Sequence[ItineraryInput],
    origin: Coordinates,
    destination: Coordinates,
    *,
    policy: Optional[ScoringPolicy] = None,
    corridor_id: Optional[str] = None,
) -> BatchScoreResult:
    """
    Main batch scoring entry point (pure algorithm, no I/O).

    Parameters
    ----------
    itineraries:
        Itinerary values, or raw planner dicts that are parsed per item
        (a parse error is that item's failure).
    origin, destination:
        (lat, lon) of the travel request. Invalid coordinates affect every
        itinerary, so they raise InvalidCoordinateError before fan-out.
    policy:
        ScoringPolicy with weights and the thread pool size.
    corridor_id:
        Optional corridor name applied to every score. If omitted each
        itinerary gets its own corridor key.

    Returns
    -------
    BatchScoreResult:
        ranked: successfully scored routes, best first
        failures: itineraries that could not be evaluated, in input order
    """
    policy = policy or default_policy()
    policy.validate()

    origin = validate_coordinates(origin)
    destination = validate_coordinates(destination)

    if not itineraries:
        return BatchScoreResult(ranked=[], failures=[])

    def run(indexed):
        index, item = indexed
        return score_one(index, item, origin, destination, policy=policy, corridor_id=corridor_id)

    indexed_items = list(enumerate(itineraries))

    # Fan-out: every itinerary is independent, no shared mutable state
    if policy.max_workers == 1 or len(indexed_items) == 1:
        outcomes = [run(x) for x in indexed_items]
    else:
        workers = min(policy.max_workers, len(indexed_items))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in input order
            outcomes = list(executor.map(run, indexed_items))

    # Fan-in
    scored = [o.route for o in outcomes if o.ok]
    failures = [o.failure for o in outcomes if not o.ok]

    logger.info(
        "Scored %d of %d itineraries (%d failed)",
        len(scored),
        len(indexed_items),
        len(failures),
    )

    return BatchScoreResult(ranked=rank_routes(scored), failures=failures)
