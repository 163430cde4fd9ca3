import pytest

from box_estimator.metrics import Counter, Histogram, generate_latest


def test_counter_with_labels():
    counter = Counter("test_boxes_total", "Boxes counted in tests", labelnames=("kind",))
    counter.labels(kind="small").inc()
    counter.labels(kind="small").inc(2)
    assert counter.value(kind="small") == 3
    assert counter.value(kind="large") == 0
    assert 'test_boxes_total{kind="small"} 3.0' in generate_latest().decode("utf-8")


def test_counter_label_mismatch():
    counter = Counter("test_mismatch_total", "Mismatch", labelnames=("kind",))
    with pytest.raises(ValueError):
        counter.labels(size="small")
    with pytest.raises(ValueError):
        counter.inc(-1)


def test_histogram_buckets_are_cumulative():
    histogram = Histogram("test_minutes", "Minutes", buckets=(10, 100))
    histogram.observe(5)
    histogram.observe(50)
    histogram.observe(500)
    assert histogram.count() == 3
    text = generate_latest().decode("utf-8")
    assert 'test_minutes_bucket{le="10.0"} 1' in text
    assert 'test_minutes_bucket{le="100.0"} 2' in text
    assert 'test_minutes_bucket{le="+Inf"} 3' in text
    assert "test_minutes_sum 555.0" in text
