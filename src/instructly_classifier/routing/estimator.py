"""Topic complexity heuristics used for tier routing."""

from __future__ import annotations

from typing import List, Protocol, Sequence


class IComplexitySignal(Protocol):
    """Detects one indicator that a topic needs the more capable tier."""

    def detect(self, topic: str) -> bool:  # pragma: no cover - Protocol signature
        ...

    def describe(self, topic: str) -> str:  # pragma: no cover - Protocol signature
        ...


class KeywordSignal:
    """Flags topics that mention analytical or higher-order vocabulary."""

    KEYWORDS = (
        "analyze",
        "compare",
        "evaluate",
        "synthesize",
        "design",
        "create",
        "theory",
        "framework",
        "methodology",
        "strategy",
        "philosophy",
    )

    def __init__(self, keywords: Sequence[str] | None = None):
        self.keywords = tuple(k.lower() for k in (keywords or self.KEYWORDS))

    def matches(self, topic: str) -> List[str]:
        lowered = topic.lower()
        return [keyword for keyword in self.keywords if keyword in lowered]

    def detect(self, topic: str) -> bool:
        return bool(self.matches(topic))

    def describe(self, topic: str) -> str:
        return f"keywords={','.join(self.matches(topic))}"


class LengthSignal:
    """Flags topics longer than a character threshold."""

    def __init__(self, threshold: int = 100):
        if threshold < 0:
            raise ValueError("threshold must be non-negative")
        self.threshold = threshold

    def detect(self, topic: str) -> bool:
        return len(topic) > self.threshold

    def describe(self, topic: str) -> str:
        return f"length={len(topic)}>{self.threshold}"


class ComplexityHeuristic:
    """A topic is complex when any configured signal fires."""

    def __init__(self, signals: Sequence[IComplexitySignal]):
        if not signals:
            raise ValueError("At least one complexity signal must be provided")
        self._signals = list(signals)

    def is_complex(self, topic: str) -> bool:
        return any(signal.detect(topic) for signal in self._signals)

    def reasons(self, topic: str) -> List[str]:
        return [
            signal.describe(topic) for signal in self._signals if signal.detect(topic)
        ]


def default_complexity_heuristic(length_threshold: int = 100) -> ComplexityHeuristic:
    """Factory producing the heuristic with the built-in signals."""

    return ComplexityHeuristic([KeywordSignal(), LengthSignal(length_threshold)])
