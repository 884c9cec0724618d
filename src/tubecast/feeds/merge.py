"""Merge freshly fetched episodes into an existing feed's episode list."""

from collections.abc import Sequence

from tubecast.feeds.models import Episode
from tubecast.utils.errors import InconsistentFeedError


def order_newest_first(episodes: Sequence[Episode]) -> list[Episode]:
    """Sort episodes by publish date, newest first.

    The sort is stable, so episodes sharing a publish date keep the order the
    source reported them in.
    """
    return sorted(episodes, key=lambda episode: episode.publish_date, reverse=True)


def merge_new_episodes(
    existing: Sequence[Episode], candidates: Sequence[Episode]
) -> list[Episode]:
    """Select and number the candidates that are not yet published.

    Both inputs are newest-first. The result holds only novel episodes,
    oldest-first, numbered from one past the newest existing episode.

    Args:
        existing: Episodes already in the feed, newest first
        candidates: Normalized, unnumbered episodes, newest first

    Returns:
        Novel episodes, oldest first, with ``episode_number`` assigned

    Raises:
        InconsistentFeedError: If the newest existing episode has no number

    Example:
        >>> novel = merge_new_episodes(existing, candidates)
        >>> [(e.id, e.episode_number) for e in novel]
        [('c', 6), ('b', 7)]
    """
    seen_ids = {episode.id for episode in existing}
    novel = []
    for episode in candidates:
        if episode.id in seen_ids:
            continue
        # Repeats within one fetch count as already seen too
        seen_ids.add(episode.id)
        novel.append(episode)

    if existing:
        last_number = existing[0].episode_number
        if last_number is None:
            raise InconsistentFeedError(
                f"Newest episode '{existing[0].id}' has no episode number; "
                f"cannot continue numbering"
            )
    else:
        last_number = 0

    return [
        episode.with_episode_number(last_number + offset)
        for offset, episode in enumerate(reversed(novel), start=1)
    ]
