"""
Similarity of a candidate game to a list of games from the user's history.

History lists carry only game ids; full records are resolved through an
injected game_lookup (any Mapping[str, Game]). Similarity is the mean cosine
similarity of genre vectors against every resolvable history game.
"""

import logging
from typing import List, Mapping, Optional

from ...models.game import Game
from ...utils.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def history_similarity(
    candidate: Game,
    history_ids: List[str],
    game_lookup: Optional[Mapping[str, Game]],
) -> float:
    """
    Mean genre cosine similarity between candidate and each history game.

    Returns 0 for an empty list, a missing lookup, or when no id resolves.
    Ids that do not resolve are skipped.
    """
    if not history_ids or game_lookup is None:
        return 0.0

    total_sim = 0.0
    resolved = 0
    skipped = 0
    for game_id in history_ids:
        past = game_lookup.get(game_id)
        if past is None:
            skipped += 1
            continue
        total_sim += cosine_similarity(candidate.genre_vector, past.genre_vector)
        resolved += 1

    if skipped:
        logger.debug(
            "[history_similarity] HISTORY_GAME_UNRESOLVED skipped=%s total=%s",
            skipped, len(history_ids),
        )
    return total_sim / resolved if resolved else 0.0
