from typing import Iterable, List

CHECKPOINT_INTERVAL = 20


def create_default_hints(length: int, interval: int = CHECKPOINT_INTERVAL) -> List[int]:
    """A checkpoint every `interval` steps below `length`, plus one on the last step."""
    if length <= 0:
        return []
    hints = list(range(interval, length, interval))
    hints.append(length)
    return hints


def normalize_hint_steps(hints: Iterable, max_step: int) -> List[int]:
    # Keep integer steps in [1, max_step], unique and ascending
    if max_step <= 0 or hints is None:
        return []
    cleaned = set()
    for value in hints:
        if isinstance(value, bool):
            continue
        if isinstance(value, float):
            if not value.is_integer():
                continue
            value = int(value)
        if not isinstance(value, int):
            continue
        if 1 <= value <= max_step:
            cleaned.add(value)
    return sorted(cleaned)


def add_hint(hints: Iterable[int], step: int, max_step: int) -> List[int]:
    if not 1 <= step <= max_step:
        raise ValueError(f"Hint step {step} outside 1..{max_step}")
    return normalize_hint_steps(list(hints) + [step], max_step)


def remove_hint(hints: Iterable[int], step: int, max_step: int) -> List[int]:
    return normalize_hint_steps([h for h in hints if h != step], max_step)
