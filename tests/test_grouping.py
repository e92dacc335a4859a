"""
Unit tests for the duplicate and similarity grouping engines.
"""

import itertools
import random
import threading

import pytest

from imagecompare.config import MAX_PIXEL
from imagecompare.engine import (
    PixelBuffer,
    OperationCancelled,
    GroupingContext,
    generate_fingerprint,
    group_duplicates,
    group_similar,
    is_duplicate,
)
from imagecompare.engine.grouping import bucket_by_color
from imagecompare.models import Fingerprint


def _fp(id, r=100, g=100, b=100, hash=bytes(MAX_PIXEL)):
    return Fingerprint(id=id, r=r, g=g, b=b, hash=hash)


def _solid_fp(id, color):
    return generate_fingerprint(PixelBuffer.solid(20, 20, color), id)


class TestGroupingContext:
    """Test id to path translation."""

    def test_translate(self):
        context = GroupingContext.from_paths(['a.png', 'b.png', 'c.png'])
        assert context.translate([[0, 2], [1]]) == [['a.png', 'c.png'], ['b.png']]

    def test_path_for_unknown(self):
        context = GroupingContext.from_paths(['a.png'])
        assert context.path_for(0) == 'a.png'
        assert context.path_for(5) is None

    def test_unknown_ids_dropped(self):
        context = GroupingContext.from_paths(['a.png'])
        assert context.translate([[0, 9]]) == [['a.png']]


class TestGroupDuplicates:
    """Test sort-then-scan duplicate grouping."""

    def test_solid_colors(self):
        fps = [
            _solid_fp(0, (255, 0, 0)),
            _solid_fp(1, (0, 0, 255)),
            _solid_fp(2, (255, 0, 0)),
            _solid_fp(3, (0, 255, 0)),
        ]
        assert group_duplicates(fps) == [[0, 2]]

    def test_no_singleton_groups(self):
        fps = [_solid_fp(i, (i * 40, i * 20, i * 10)) for i in range(6)]
        fps.append(_solid_fp(6, (0, 0, 0)))
        groups = group_duplicates(fps)
        assert groups == [[0, 6]]
        assert all(len(g) >= 2 for g in groups)

    def test_run_closed_on_first_mismatch(self):
        # 1 is within tolerance of 0, 2 is within tolerance of 1 but not of 0
        fps = [_fp(0, r=10), _fp(1, r=13), _fp(2, r=16)]
        assert group_duplicates(fps) == [[0, 1]]

    def test_run_compared_with_every_member(self):
        # 2 is within tolerance of 0 but not of 1
        fps = [_fp(0, r=10), _fp(1, r=13), _fp(2, r=7)]
        assert group_duplicates(fps) == [[0, 1]]

    @pytest.mark.parametrize("reds", [
        [10, 13, 7],
        [10, 12, 8, 11, 9, 13, 7],
        [0, 3, 6, 9, 12],
    ])
    def test_members_are_pairwise_duplicates(self, reds):
        fps = [_fp(i, r=r) for i, r in enumerate(reds)]
        fps += [_solid_fp(len(reds) + i, (255, 0, 0) if i % 2 else (0, 0, 255)) for i in range(8)]
        by_id = {fp.id: fp for fp in fps}
        for group in group_duplicates(fps):
            for a, b in itertools.combinations(group, 2):
                assert is_duplicate(by_id[a], by_id[b]), (a, b)

    def test_membership_independent_of_input_order(self):
        fps = [_solid_fp(i, (255, 0, 0) if i % 3 else (0, 128, 0)) for i in range(9)]
        expected = sorted(sorted(g) for g in group_duplicates(fps))

        shuffled = list(fps)
        random.Random(7).shuffle(shuffled)
        assert sorted(sorted(g) for g in group_duplicates(shuffled)) == expected

    def test_empty(self):
        assert group_duplicates([]) == []


class TestBucketByColor:
    """Test color bucketing."""

    def test_buckets(self):
        fps = [_fp(0), _fp(1, r=0), _fp(2, r=102), _fp(3, r=2)]
        buckets = bucket_by_color(fps)
        assert [[fp.id for fp in b] for b in buckets] == [[0, 2], [1, 3]]

    def test_singletons_dropped(self):
        assert bucket_by_color([_fp(0), _fp(1, r=0)]) == []


class TestGroupSimilar:
    """Test threshold clustering inside color buckets."""

    def test_clusters(self):
        near = bytes([50]) * 10 + bytes(MAX_PIXEL - 10)
        fps = [
            _fp(0),
            _fp(1, hash=near),
            _fp(2, hash=bytes([200]) * MAX_PIXEL),
            _fp(3, r=0, g=0, b=0),
        ]
        assert group_similar(fps, threshold=90) == [[0, 1]]

    def test_each_fingerprint_in_one_group(self):
        fps = [_fp(i) for i in range(6)]
        groups = group_similar(fps, threshold=90, workers=2)
        assert groups == [[0, 1, 2, 3, 4, 5]]

    def test_threshold_excludes(self):
        half = bytes([50]) * 128 + bytes(MAX_PIXEL - 128)
        fps = [_fp(0), _fp(1, hash=half)]
        # 50 % layout + 100 % color averages to 75
        assert group_similar(fps, threshold=75) == [[0, 1]]
        assert group_similar(fps, threshold=76) == []

    def test_cancel(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(OperationCancelled):
            group_similar([_fp(0), _fp(1)], threshold=90, cancel=cancel)

    def test_empty(self):
        assert group_similar([], threshold=90) == []
