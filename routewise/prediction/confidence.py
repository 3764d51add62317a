"""
Confidence Bands
================
Deterministic confidence-to-minutes mapping for the ± band shown next to
the clock-out estimate. Kept boring and predictable so carriers learn to
trust it.
"""

CONFIDENCE_MINUTES = {
    'high': 10,
    'medium': 20,
    'low': 35,
}
WAYPOINT_ENHANCED_MINUTES = 8
DEFAULT_MINUTES = 25


def confidence_to_minutes(confidence: str, waypoint_enhanced: bool = False) -> int:
    """Map a confidence tag to a ± minutes band."""
    if waypoint_enhanced:
        return WAYPOINT_ENHANCED_MINUTES
    return CONFIDENCE_MINUTES.get(confidence, DEFAULT_MINUTES)
