from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

Sample = Tuple[str, Dict[str, str], float]
LabelKey = Tuple[str, ...]

_REGISTRY: List["_MetricBase"] = []


class _MetricBase:
    type = "untyped"

    def __init__(self, name: str, documentation: str, labelnames: Iterable[str] | None = None):
        self.name = name
        self.documentation = documentation
        self.labelnames: LabelKey = tuple(labelnames or ())
        _REGISTRY.append(self)

    def _key(self, labels: Dict[str, str]) -> LabelKey:
        if set(labels) != set(self.labelnames):
            raise ValueError(
                f"Label mismatch for {self.name}: expected {sorted(self.labelnames)}, got {sorted(labels)}"
            )
        return tuple(str(labels[label]) for label in self.labelnames)

    def _label_dict(self, key: LabelKey) -> Dict[str, str]:
        return dict(zip(self.labelnames, key))

    def samples(self) -> Iterator[Sample]:
        raise NotImplementedError


class _BoundCounter:
    def __init__(self, parent: "Counter", key: LabelKey):
        self._parent = parent
        self._key = key

    def inc(self, amount: float = 1.0) -> None:
        self._parent._increment(self._key, amount)


class Counter(_MetricBase):
    type = "counter"

    def __init__(self, name: str, documentation: str, labelnames: Iterable[str] | None = None):
        super().__init__(name, documentation, labelnames)
        self._values: Dict[LabelKey, float] = {}

    def _increment(self, key: LabelKey, amount: float) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        self._values[key] = self._values.get(key, 0.0) + amount

    def inc(self, amount: float = 1.0) -> None:
        self._increment(self._key({}), amount)

    def labels(self, **labels: str) -> _BoundCounter:
        return _BoundCounter(self, self._key(labels))

    def value(self, **labels: str) -> float:
        return self._values.get(self._key(labels), 0.0)

    def samples(self) -> Iterator[Sample]:
        for key, value in self._values.items():
            yield self.name, self._label_dict(key), value


class _BoundHistogram:
    def __init__(self, parent: "Histogram", key: LabelKey):
        self._parent = parent
        self._key = key

    def observe(self, value: float) -> None:
        self._parent._observe(self._key, value)


class Histogram(_MetricBase):
    type = "histogram"

    def __init__(
        self,
        name: str,
        documentation: str,
        buckets: Iterable[float],
        labelnames: Iterable[str] | None = None,
    ):
        super().__init__(name, documentation, labelnames)
        bounds = tuple(sorted(float(b) for b in buckets))
        if not bounds or bounds[-1] != float("inf"):
            bounds += (float("inf"),)
        self._buckets = bounds
        self._counts: Dict[LabelKey, List[int]] = {}
        self._sums: Dict[LabelKey, float] = {}

    def _observe(self, key: LabelKey, value: float) -> None:
        counts = self._counts.setdefault(key, [0] * len(self._buckets))
        for idx, upper in enumerate(self._buckets):
            if value <= upper:
                counts[idx] += 1
                break
        self._sums[key] = self._sums.get(key, 0.0) + value

    def observe(self, value: float) -> None:
        self._observe(self._key({}), value)

    def labels(self, **labels: str) -> _BoundHistogram:
        return _BoundHistogram(self, self._key(labels))

    def count(self, **labels: str) -> int:
        return sum(self._counts.get(self._key(labels), []))

    def samples(self) -> Iterator[Sample]:
        for key, counts in self._counts.items():
            labels = self._label_dict(key)
            cumulative = 0
            for upper, hits in zip(self._buckets, counts):
                cumulative += hits
                le = "+Inf" if upper == float("inf") else repr(upper)
                yield f"{self.name}_bucket", {**labels, "le": le}, cumulative
            yield f"{self.name}_count", labels, cumulative
            yield f"{self.name}_sum", labels, self._sums.get(key, 0.0)


def _format_labels(labels: Dict[str, str]) -> str:
    if not labels:
        return ""
    inner = ",".join(f'{key}="{value}"' for key, value in sorted(labels.items()))
    return "{" + inner + "}"


def generate_latest() -> bytes:
    lines: List[str] = []
    for metric in _REGISTRY:
        lines.append(f"# HELP {metric.name} {metric.documentation}")
        lines.append(f"# TYPE {metric.name} {metric.type}")
        for sample_name, labels, value in metric.samples():
            lines.append(f"{sample_name}{_format_labels(labels)} {value}")
    return ("\n".join(lines) + "\n").encode("utf-8")
