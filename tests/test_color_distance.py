"""
Unit tests for the CIEDE2000 color difference.

Reference pairs come from the published CIEDE2000 test data set
(Sharma, Wu & Dalal, 2005).
"""
import numpy as np
import pytest

from domain.dtos import Lab
from services.color_distance import ciede2000

SHARMA_PAIRS = [
    ((50.0, 2.6772, -79.7751), (50.0, 0.0, -82.7485), 2.0425),
    ((50.0, 3.1571, -77.2803), (50.0, 0.0, -82.7485), 2.8615),
    ((50.0, 2.8361, -74.0200), (50.0, 0.0, -82.7485), 3.4412),
    ((50.0, -1.3802, -84.2814), (50.0, 0.0, -82.7485), 1.0000),
    ((50.0, 0.0, 0.0), (50.0, -1.0, 2.0), 2.3669),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0009), 7.1792),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0011), 7.2195),
    ((50.0, -0.0010, 2.4900), (50.0, 0.0009, -2.4900), 4.8045),
    ((50.0, 2.5000, 0.0), (50.0, 0.0, -2.5000), 4.3065),
    ((50.0, 2.5000, 0.0), (73.0, 25.0, -18.0), 27.1492),
    ((50.0, 2.5000, 0.0), (61.0, -5.0, 29.0), 22.8977),
    ((50.0, 2.5000, 0.0), (56.0, -27.0, -3.0), 31.9030),
    ((50.0, 2.5000, 0.0), (58.0, 24.0, 15.0), 19.4535),
]


class TestReferenceData:
    """Test against published reference values"""

    @pytest.mark.parametrize("lab1, lab2, expected", SHARMA_PAIRS)
    def test_sharma_pairs(self, lab1, lab2, expected):
        assert ciede2000(Lab(*lab1), Lab(*lab2)) == pytest.approx(expected, abs=1e-4)

    def test_black_to_white(self):
        """Pure lightness difference centered on L=50 is not rescaled"""
        assert ciede2000(Lab(0, 0, 0), Lab(100, 0, 0)) == pytest.approx(100.0, abs=1e-9)


class TestMetricProperties:
    """Test identity, symmetry and non-negativity"""

    @pytest.fixture
    def samples(self):
        rng = np.random.default_rng(7)
        labs = np.column_stack([
            rng.uniform(0, 100, 60),
            rng.uniform(-128, 127, 60),
            rng.uniform(-128, 127, 60),
        ])
        # achromatic and out-of-gamut values as well
        extra = np.array([[0, 0, 0], [100, 0, 0], [50, 0, 0], [150, 300, -300], [-20, -200, 5]])
        return [Lab(*map(float, row)) for row in np.vstack([labs, extra])]

    def test_identity(self, samples):
        for x in samples:
            assert ciede2000(x, x) == pytest.approx(0.0, abs=1e-6)

    def test_symmetry(self, samples):
        for x, y in zip(samples, samples[1:]):
            assert ciede2000(x, y) == pytest.approx(ciede2000(y, x), abs=1e-9)

    def test_non_negative_and_finite(self, samples):
        for x, y in zip(samples, reversed(samples)):
            d = ciede2000(x, y)
            assert d >= 0
            assert np.isfinite(d)

    def test_opposite_hues_are_symmetric(self):
        """Hue difference of exactly 180 degrees"""
        x, y = Lab(50, 20, 0), Lab(50, -20, 0)
        assert ciede2000(x, y) == pytest.approx(ciede2000(y, x), abs=1e-12)
        assert ciede2000(x, y) > 0

    def test_one_achromatic_color(self):
        assert ciede2000(Lab(50, 0, 0), Lab(50, 0, 30)) == pytest.approx(
            ciede2000(Lab(50, 0, 30), Lab(50, 0, 0)), abs=1e-12)
