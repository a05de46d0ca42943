"""
Shared fixtures for Field Coverage tests.
"""
import math

import pytest

from field_coverage.core.models import GeoPoint


def make_ring(lat, lon, count, radius_deg):
    """Points evenly spaced on a small circle (degrees) around a center."""
    return [
        GeoPoint(
            lat + radius_deg * math.sin(2 * math.pi * i / count),
            lon + radius_deg * math.cos(2 * math.pi * i / count),
        )
        for i in range(count)
    ]


@pytest.fixture
def ring():
    """Factory for ring-shaped point clusters."""
    return make_ring


@pytest.fixture
def dense_block(ring):
    """Ten tightly packed buildings around one center (Kilosa district)."""
    return ring(-6.8, 37.6, 10, 0.00002)
