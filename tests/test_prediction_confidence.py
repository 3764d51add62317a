"""
Tests for Confidence Bands
==========================
Tests for routewise/prediction/confidence.py
"""

import pytest

from routewise.prediction.confidence import confidence_to_minutes


class TestConfidenceToMinutes:
    """Tests for confidence_to_minutes"""

    @pytest.mark.parametrize('confidence,minutes', [
        ('high', 10),
        ('medium', 20),
        ('low', 35),
        ('evaluation', 25),
        ('estimate', 25),
        ('', 25),
    ])
    def test_mapping(self, confidence, minutes):
        assert confidence_to_minutes(confidence) == minutes

    def test_waypoint_enhanced_overrides(self):
        assert confidence_to_minutes('low', waypoint_enhanced=True) == 8
        assert confidence_to_minutes('high', waypoint_enhanced=True) == 8
