"""Candidate Scorer: sums named rules stage by stage."""

from __future__ import annotations

from stepwise.locator.candidate import ElementCandidate, TargetKind
from stepwise.locator.scoring import SCORING_STAGES, ScoringContext, ScoringStage


class CandidateScorer:
    """
    Tiered scorer for the broad-search path.

    Exact evidence scores above substring evidence, which scores above
    fuzzy-only evidence. Contextual bonuses (kind affinity, visibility)
    only apply once a candidate has some relevance.

    Args:
        stages: Ordered stage table; defaults to SCORING_STAGES
    """

    def __init__(self, stages: tuple[ScoringStage, ...] = SCORING_STAGES) -> None:
        self.stages = stages

    def score(self, candidate: ElementCandidate, target: str, kind: TargetKind = TargetKind.ANY) -> float:
        total, _ = self.explain(candidate, target, kind)
        return total

    def explain(
        self,
        candidate: ElementCandidate,
        target: str,
        kind: TargetKind = TargetKind.ANY,
    ) -> tuple[float, list[tuple[str, float]]]:
        """
        Score a candidate and report which rules contributed.

        Returns:
            (total score, [(rule name, points), ...])
        """
        ctx = ScoringContext(candidate=candidate, target=target or "", kind=kind)
        total = 0.0
        matched_exact = False
        contributions: list[tuple[str, float]] = []

        for stage in self.stages:
            if not stage.gate(ctx, total, matched_exact):
                continue
            for rule in stage.rules:
                points = rule(ctx)
                if not points:
                    continue
                total += points
                contributions.append((rule.name, points))
                if stage.marks_exact:
                    matched_exact = True
                if stage.first_hit_only:
                    break

        return total, contributions
