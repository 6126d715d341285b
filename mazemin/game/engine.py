from typing import List, Sequence

HINT_WINDOW = 20
SHORT_HINT_WINDOW = 10


def first_divergence(player_moves: Sequence[int], reference_moves: Sequence[int]) -> int:
    """
    Index of the first move where the player left the reference solution.
    -1 while the player is still on it (prefix or equal). A player who has
    matched the whole reference and kept going diverges at len(reference).
    """
    for i, (played, expected) in enumerate(zip(player_moves, reference_moves)):
        if played != expected:
            return i

    if len(player_moves) > len(reference_moves):
        return len(reference_moves)
    return -1


def hint_start(reference_length: int, progress: int, divergence: int) -> int:
    """Furthest confirmed-correct index, clamped into [0, reference_length]."""
    clamped_progress = max(0, min(int(progress), reference_length))
    if divergence >= 0:
        return max(clamped_progress, min(divergence, reference_length))
    return clamped_progress


def hint_segment(reference_moves: Sequence[int], progress: int, divergence: int, cap: int,
                 window: int = HINT_WINDOW, short_window: int = SHORT_HINT_WINDOW) -> List[int]:
    """
    Look-ahead window of the reference solution, clipped to its first `cap`
    moves. A full window when at least `window` moves remain, otherwise at
    most `short_window`.
    """
    capped = list(reference_moves[:max(0, cap)])
    start = hint_start(len(capped), progress, divergence)

    remaining = len(capped) - start
    if remaining <= 0:
        return []

    take = window if remaining >= window else min(short_window, remaining)
    return capped[start:start + take]
