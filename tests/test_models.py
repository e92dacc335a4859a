"""
Unit tests for data models (Fingerprint, CompareResult, SubImageMatch, ImageDetails).
"""

import pytest
from dataclasses import FrozenInstanceError

from imagecompare.models import (
    Fingerprint,
    CompareResult,
    SubImageMatch,
    ImageDetails,
    format_size,
)


class TestFormatSize:
    """Test the format_size utility function."""

    def test_bytes(self):
        assert format_size(500) == "500.0 B"

    def test_kilobytes(self):
        assert format_size(2048) == "2.0 KB"

    def test_megabytes(self):
        assert format_size(5242880) == "5.0 MB"

    def test_zero(self):
        assert format_size(0) == "0.0 B"


class TestFingerprint:
    """Test the Fingerprint data class."""

    def test_grid_is_row_major(self):
        fp = Fingerprint(id=0, r=1, g=2, b=3, hash=bytes(range(16)), grid_size=4)
        grid = fp.grid
        assert grid.shape == (4, 4)
        assert grid[0, 3] == 3
        assert grid[1, 0] == 4

    def test_average_color(self):
        fp = Fingerprint(id=0, r=10, g=20, b=30, hash=bytes(256))
        assert fp.average_color == (10, 20, 30)

    def test_identity_equality_only(self):
        a = Fingerprint(id=0, r=1, g=1, b=1, hash=bytes(256))
        b = Fingerprint(id=0, r=1, g=1, b=1, hash=bytes(256))
        assert a == a
        assert a != b

    def test_frozen(self):
        fp = Fingerprint(id=0, r=1, g=1, b=1, hash=bytes(256))
        with pytest.raises(FrozenInstanceError):
            fp.r = 5

    def test_to_dict(self):
        fp = Fingerprint(id=7, r=1, g=2, b=3, hash=b'\x00\xff\x10\x01', grid_size=2)
        data = fp.to_dict()
        assert data == {
            'id': 7,
            'average_color': [1, 2, 3],
            'grid_size': 2,
            'hash': '00ff1001',
        }


class TestCompareResult:
    """Test CompareResult serialization."""

    def test_to_dict_rounds_similarity(self):
        result = CompareResult(similarity=16.796875, descriptor_a="a", descriptor_b="b")
        assert result.to_dict() == {
            'similarity': 16.8,
            'descriptor_a': 'a',
            'descriptor_b': 'b',
        }


class TestSubImageMatch:
    """Test SubImageMatch."""

    def test_not_found(self):
        match = SubImageMatch.not_found()
        assert match.found is False
        assert match.offset == (-1, -1)

    def test_to_dict(self):
        match = SubImageMatch(found=True, offset=(20, 30))
        assert match.to_dict() == {'found': True, 'x': 20, 'y': 30}


class TestImageDetails:
    """Test ImageDetails data class."""

    def test_properties(self):
        info = ImageDetails(path="/path/to/image.PNG", width=20, height=10, file_size=2048)
        assert info.name == "image.PNG"
        assert info.extension == ".PNG"
        assert info.pixel_count == 200
        assert info.file_size_formatted == "2.0 KB"

    def test_describe(self):
        info = ImageDetails(path="/tmp/a.png", width=20, height=10)
        assert info.describe() == "Path: /tmp/a.png, Name: a.png, Height: 10, Width: 20, Size: 200"

    def test_describe_simple(self):
        info = ImageDetails(width=20, height=10)
        assert info.describe_simple() == "Height: 10, Width: 20, Size: 200"

    def test_default_similarity(self):
        assert ImageDetails().similarity == 100.0

    def test_to_dict(self):
        info = ImageDetails(path="/tmp/a.png", width=4, height=3, file_size=10, r=1, g=2, b=3,
                            similarity=50.123)
        data = info.to_dict()
        assert data['average_color'] == [1, 2, 3]
        assert data['similarity'] == 50.12
        assert data['name'] == "a.png"
        assert data['extension'] == ".png"
