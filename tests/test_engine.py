"""Tests for the cross-difficulty hitsound consistency check."""

from __future__ import annotations

import pytest

from mapset_checks.data.beatmap import CueDescriptor, HitSound, Point, SampleSet, Span, Variant
from mapset_checks.hitsounds.config import HitsoundCheckConfig
from mapset_checks.hitsounds.engine import (
    ComparisonBudgetExceeded,
    IndependentScheme,
    MissingCues,
    SpanBodyCue,
    find_span_body_cues,
    run,
)

W = HitSound.WHISTLE
C = HitSound.CLAP
F = HitSound.FINISH
NONE = HitSound.NONE


def _point(time: float, hitsound: HitSound = NONE, sampleset: SampleSet = SampleSet.AUTO) -> Point:
    return Point(time=time, cue=CueDescriptor(hitsound, sampleset))


def _span(start: float, end: float, head: HitSound = NONE, tail: HitSound = NONE) -> Span:
    return Span(start=start, end=end, start_cue=CueDescriptor(head), end_cue=CueDescriptor(tail))


def _variant(name: str, *events) -> Variant:
    return Variant(name=name, events=events)


def _missing(findings) -> list[MissingCues]:
    return [f for f in findings if isinstance(f, MissingCues)]


class TestBoundaries:
    def test_empty_set(self):
        assert run([]) == []

    def test_single_variant(self):
        v = _variant("Solo", _point(1000, C), _span(2000, 2500, head=W))
        assert run([v]) == []

    def test_identical_variants_have_no_findings(self):
        events = (_point(1000, C), _point(1500, W | F), _span(2000, 2400, tail=C))
        assert run([_variant("A", *events), _variant("B", *events)]) == []

    def test_zero_event_variant(self):
        a = _variant("A", _point(1000, C))
        empty = _variant("Empty")
        assert run([a, empty]) == []


class TestMissingCues:
    def test_missing_clap_reported_on_deficient_side(self):
        a = _variant("A", _point(3000, C))
        b = _variant("B", _point(3000))
        assert run([a, b]) == [
            MissingCues(timestamp=3000, variant="B", missing=("Clap",), contributors=("A",)),
        ]

    def test_three_way_finish(self):
        a = _variant("A", _point(5000, F))
        b = _variant("B", _point(5000, F))
        c = _variant("C", _point(5000))
        assert run([a, b, c]) == [
            MissingCues(timestamp=5000, variant="C", missing=("Finish",), contributors=("A", "B")),
        ]

    def test_timestamp_tolerance(self):
        a = _variant("A", _point(1000.4, C))
        b = _variant("B", _point(1000.6))
        assert run([a, b]) == [
            MissingCues(timestamp=1000, variant="B", missing=("Clap",), contributors=("A",)),
        ]

    def test_missing_names_and_contributors_deduplicated(self):
        a = _variant("A", _point(1000, W))
        b = _variant("B", _point(1000, W | C))
        c = _variant("C", _point(1000, C | F))
        d = _variant("D", _point(1000))
        findings = [f for f in run([a, b, c, d]) if f.variant == "D"]
        assert findings == [
            MissingCues(
                timestamp=1000,
                variant="D",
                missing=("Whistle", "Clap", "Finish"),
                contributors=("A", "B", "C"),
            ),
        ]

    def test_slider_tail_compared(self):
        a = _variant("A", _span(1000, 1800, tail=F))
        b = _variant("B", _span(1000, 1800))
        assert run([a, b]) == [
            MissingCues(timestamp=1800, variant="B", missing=("Finish",), contributors=("A",)),
        ]

    def test_slider_tail_against_circle(self):
        a = _variant("A", _span(1000, 1500), _point(2000))
        b = _variant("B", _point(1000), _point(1500, W), _point(2000))
        assert _missing(run([a, b])) == [
            MissingCues(timestamp=1500, variant="A", missing=("Whistle",), contributors=("B",)),
        ]

    def test_zero_length_slider_reported_once(self):
        a = _variant("A", _point(1000, C))
        b = _variant("B", _span(1000, 1000))
        assert run([a, b]) == [
            MissingCues(timestamp=1000, variant="B", missing=("Clap",), contributors=("A",)),
        ]

    def test_slider_shorter_than_window_reported_once(self):
        a = _variant("A", _point(1000, C))
        b = _variant("B", _span(1000.2, 1000.9))
        assert len(_missing(run([a, b]))) == 1

    def test_head_reported_before_tail(self):
        a = _variant("A", _span(1000, 1500, head=C, tail=C))
        b = _variant("B", _span(1000, 1500))
        findings = _missing(run([a, b], HitsoundCheckConfig(check_span_bodies=False)))
        assert [f.timestamp for f in findings] == [1000, 1500]

    def test_slider_body_instants_skipped(self):
        # A's circle at 1250 lands inside B's slider body
        a = _variant("A", _point(1000), _point(1250, C))
        b = _variant("B", _span(1000, 1500))
        assert _missing(run([a, b])) == []

    def test_sample_set_mismatch_is_not_missing(self):
        a = _variant("A", _point(1000, C, SampleSet.SOFT))
        b = _variant("B", _point(1000, C, SampleSet.DRUM))
        assert run([a, b]) == []

    def test_min_contributors(self):
        a = _variant("A", _point(1000, C))
        b = _variant("B", _point(1000))
        c = _variant("C", _point(1000))
        config = HitsoundCheckConfig(min_contributors=2)
        assert run([a, b, c], config) == []

        d = _variant("D", _point(1000, C))
        findings = run([a, b, c, d], config)
        assert [f.variant for f in findings] == ["B", "C"]


def _outlier_set() -> list[Variant]:
    shared = [_point(1000 + i * 500, W) for i in range(20)]
    guest = [_point(1000 + i * 500, C) for i in range(20)]
    guest[3] = _point(2500, F)
    return [
        _variant("Normal", *shared),
        _variant("Hard", *shared),
        _variant("Guest", *guest),
        _variant("Insane", *shared),
    ]


class TestIndependentScheme:
    def test_independent_variant_reported_once(self):
        findings = run(_outlier_set())
        assert findings == [IndependentScheme("Guest")]

    def test_without_exclusion_every_event_is_reported(self):
        config = HitsoundCheckConfig(exclude_independent=False)
        findings = run(_outlier_set(), config)
        assert not any(isinstance(f, IndependentScheme) for f in findings)
        guest = [f for f in findings if f.variant == "Guest"]
        assert len(guest) == 20
        assert guest[0].missing == ("Whistle",)
        assert guest[0].contributors == ("Normal", "Hard", "Insane")

    def test_independent_variant_still_gets_body_findings(self):
        variants = _outlier_set()
        guest = variants[2]
        variants[2] = Variant(name="Guest", events=guest.events + (_span(12000, 12400, head=C),))
        findings = run(variants)
        assert findings[0] == IndependentScheme("Guest")
        assert SpanBodyCue(timestamp=12000, variant="Guest", cues=("Clap",)) in findings


class TestSpanBodyCues:
    def test_head_additions_reported(self):
        v = _variant("A", _span(1000.6, 1400, head=W | F), _span(2000, 2400, tail=C), _point(3000, C))
        assert find_span_body_cues(v) == [
            SpanBodyCue(timestamp=1000, variant="A", cues=("Whistle", "Finish")),
        ]

    def test_normal_only_head_not_reported(self):
        v = _variant("A", _span(1000, 1400, head=HitSound.NORMAL))
        assert find_span_body_cues(v) == []

    def test_body_findings_come_last(self):
        a = _variant("A", _span(1000, 1400, head=C), _point(2000, W))
        b = _variant("B", _span(1000, 1400, head=C), _point(2000))
        assert run([a, b]) == [
            MissingCues(timestamp=2000, variant="B", missing=("Whistle",), contributors=("A",)),
            SpanBodyCue(timestamp=1000, variant="A", cues=("Clap",)),
            SpanBodyCue(timestamp=1000, variant="B", cues=("Clap",)),
        ]

    def test_disabled(self):
        a = _variant("A", _span(1000, 1400, head=C))
        b = _variant("B", _span(1000, 1400, head=C))
        assert run([a, b], HitsoundCheckConfig(check_span_bodies=False)) == []


class TestComparisonBudget:
    def test_exceeding_budget_raises(self):
        a = _variant("A", *(_point(i * 100) for i in range(50)))
        b = _variant("B", *(_point(i * 100) for i in range(50)))
        with pytest.raises(ComparisonBudgetExceeded):
            run([a, b], HitsoundCheckConfig(max_comparisons=100))

    def test_unlimited(self):
        a = _variant("A", *(_point(i * 100) for i in range(50)))
        b = _variant("B", *(_point(i * 100) for i in range(50)))
        assert run([a, b], HitsoundCheckConfig(max_comparisons=None)) == []


class TestConfig:
    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError):
            HitsoundCheckConfig(timestamp_window=0)

    def test_rejects_zero_contributors(self):
        with pytest.raises(ValueError):
            HitsoundCheckConfig(min_contributors=0)

    def test_from_dict_ignores_unknown_keys(self):
        config = HitsoundCheckConfig.from_dict({"min_contributors": 2, "colour": "red"})
        assert config.min_contributors == 2
        assert config.exclude_independent is True
