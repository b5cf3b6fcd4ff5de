"""Multi-channel similarity recommendations.

Scores every candidate against a target item on each text channel with
TF-IDF and combines the channel scores into one ranked list.
"""

import logging
from typing import Dict, List, Optional, Sequence

from src.recommender.models import CHANNELS, CatalogItem, Recommendation, ScoreBreakdown
from src.recommender.tfidf import DEFAULT_STOP_WORDS, StopWords, score_documents

# Configure module logger
logger = logging.getLogger(__name__)

# Default ranking parameters
DEFAULT_TOP_N = 4
DEFAULT_CHANNEL_WEIGHT = 1.0


class SimilarityRecommender:
    """Ranks catalog items by per-channel TF-IDF similarity to a target.
    """

    def __init__(
        self,
        top_n: int = DEFAULT_TOP_N,
        channel_weights: Optional[Dict[str, float]] = None,
        stop_words: StopWords = DEFAULT_STOP_WORDS,
    ):
        """Initialize the recommender.

        Channel weights scale each channel's score before it goes into the
        breakdown. Channels without a weight use 1.0, so by default the
        total is the plain sum of the channel scores.
        """
        channel_weights = channel_weights or {}
        unknown = set(channel_weights) - set(CHANNELS)
        if unknown:
            raise ValueError(f"Unknown channels in weights: {sorted(unknown)}")

        self.top_n = top_n
        self.stop_words = stop_words
        self.channel_weights = {
            channel: float(channel_weights.get(channel, DEFAULT_CHANNEL_WEIGHT))
            for channel in CHANNELS
        }

        logger.debug(
            f"Initialized SimilarityRecommender: top_n={top_n}, "
            f"weights={self.channel_weights}"
        )

    def _score_channel(
        self,
        channel: str,
        target: CatalogItem,
        candidates: Sequence[CatalogItem],
    ) -> List[float]:
        """Score all candidates on one channel.
        """
        documents = [candidate.channel_text(channel) for candidate in candidates]
        scores = score_documents(
            documents,
            target.channel_text(channel),
            stop_words=self.stop_words,
        )
        weight = self.channel_weights[channel]
        return [weight * score for score in scores]

    def score_candidates(
        self,
        target: CatalogItem,
        candidates: Sequence[CatalogItem],
    ) -> List[ScoreBreakdown]:
        """Get a score breakdown for every candidate, in input order."""
        channel_scores = {
            channel: self._score_channel(channel, target, candidates)
            for channel in CHANNELS
        }

        breakdowns = []
        for idx in range(len(candidates)):
            values = {}
            for channel in CHANNELS:
                scores = channel_scores[channel]
                values[channel] = scores[idx] if idx < len(scores) else 0.0
            breakdowns.append(ScoreBreakdown(**values))
        return breakdowns

    def recommend(
        self,
        target: CatalogItem,
        candidates: Sequence[CatalogItem],
    ) -> List[Recommendation]:
        """Get the candidates most similar to the target.

        Args:
            target: Item to find similar products for.
            candidates: Comparison population, which must not contain the
                target. Its order decides ties.

        Returns:
            At most ``top_n`` recommendations, highest score first. Items
            with equal scores keep their order from ``candidates``.
        """
        # The target never recommends itself, even if a caller passes it in
        candidates = [item for item in candidates if item.id != target.id]
        if not candidates:
            logger.info(f"No comparison items for product {target.id}")
            return []

        breakdowns = self.score_candidates(target, candidates)
        results = [
            Recommendation(item=item, score=breakdown.total, breakdown=breakdown)
            for item, breakdown in zip(candidates, breakdowns)
        ]

        # sorted() is stable, also with reverse=True
        ranked = sorted(results, key=lambda rec: rec.score, reverse=True)

        logger.debug(
            f"Ranked {len(ranked)} candidates for product {target.id}, "
            f"returning top {self.top_n}"
        )
        return ranked[: self.top_n]
