"""
Planar geometry helpers for asset positions.

Positions are treated as points on a flat 2D plane (x = longitude,
y = latitude). No great-circle correction is applied.
"""

from typing import Iterable, NamedTuple, Sequence

import numpy as np

from asset_tracking.app.core.exceptions import EmptyInputError


class Position(NamedTuple):
    """A latitude/longitude pair."""
    latitude: float
    longitude: float


ORIGIN = Position(0.0, 0.0)


def positions_of(items: Iterable) -> list[Position]:
    """Extract positions from anything exposing `latitude` and `longitude`."""
    return [Position(item.latitude, item.longitude) for item in items]


def centroid(positions: Sequence[Position]) -> Position:
    """
    Compute the arithmetic-mean position of a set of points.
    
    Args:
        positions: Non-empty sequence of positions
    
    Returns:
        Position whose latitude and longitude are the means of the inputs
    
    Raises:
        EmptyInputError: If `positions` is empty
    """
    if len(positions) == 0:
        raise EmptyInputError()

    coords = np.asarray(positions, dtype=float)
    # Averaging offsets from the first point keeps identical inputs exact.
    origin = coords[0]
    mean = origin + (coords - origin).mean(axis=0)
    return Position(float(mean[0]), float(mean[1]))
