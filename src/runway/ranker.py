"""Pick the endpoint that makes the best first request.

A "quick win" is an endpoint a newcomer can call successfully right away:
a side-effect free GET on a short, well-known path with nothing to fill in.
Every endpoint gets an additive score from a :class:`~runway.models.ScoringPolicy`
and the highest one wins. Ties keep document order, so the result never
depends on anything but the spec itself.

Typical usage::

    from runway.ranker import alternatives, pick_best

    best = pick_best(spec)
    others = alternatives(spec, best, limit=4)
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from runway.models import (
    Endpoint,
    HTTPMethod,
    NormalizedSpec,
    ParameterLocation,
    ScoredEndpoint,
    ScoringPolicy,
)

logger = logging.getLogger(__name__)

DEFAULT_POLICY = ScoringPolicy()


def score_endpoint(endpoint: Endpoint, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    """Return the quick-win score of *endpoint*; higher is better.

    Example::

        >>> score_endpoint(Endpoint(path="/health", method=HTTPMethod.GET))
        178
    """
    path = endpoint.path
    score = 0

    if endpoint.method == HTTPMethod.GET:
        score += policy.get_bonus

    for index, pattern in enumerate(policy.quick_win_patterns):
        if re.fullmatch(pattern, path, re.IGNORECASE):
            score += policy.pattern_base - index
            break

    required = sum(1 for p in endpoint.parameters if p.required)
    score -= required * policy.required_param_penalty

    if endpoint.request_body is None:
        score += policy.no_body_bonus

    segments = [s for s in path.split("/") if s]
    score -= len(segments) * policy.segment_penalty

    # path parameters cost extra on top of the required-parameter penalty
    path_params = sum(1 for p in endpoint.parameters if p.location == ParameterLocation.PATH)
    score -= path_params * policy.path_param_penalty

    if endpoint.summary:
        score += policy.summary_bonus

    if re.fullmatch(policy.collection_pattern, path, re.IGNORECASE):
        score += policy.collection_bonus

    return score


def rank_endpoints(
    spec: NormalizedSpec, policy: ScoringPolicy = DEFAULT_POLICY
) -> list[ScoredEndpoint]:
    """Score every endpoint and sort best-first.

    The sort is stable: endpoints with equal scores stay in document order.
    """
    scored = [
        ScoredEndpoint(endpoint=endpoint, score=score_endpoint(endpoint, policy))
        for endpoint in spec.endpoints
    ]
    return sorted(scored, key=lambda item: item.score, reverse=True)


def pick_best(
    spec: NormalizedSpec, policy: ScoringPolicy = DEFAULT_POLICY
) -> Optional[Endpoint]:
    """Return the highest-scoring endpoint, or ``None`` when there are none."""
    ranked = rank_endpoints(spec, policy)
    if not ranked:
        logger.debug("No endpoints to rank in %r", spec.title)
        return None
    best = ranked[0]
    logger.debug("Selected %s (score %d)", best.endpoint.label, best.score)
    return best.endpoint


def alternatives(
    spec: NormalizedSpec, selected: Endpoint, limit: int = 5
) -> list[Endpoint]:
    """Other endpoints to offer next to *selected*, in document order.

    Only the ``(path, method)`` pair of *selected* is excluded; the list is
    not re-ranked.
    """
    others = [
        endpoint
        for endpoint in spec.endpoints
        if not (endpoint.path == selected.path and endpoint.method == selected.method)
    ]
    return others[: max(limit, 0)]
