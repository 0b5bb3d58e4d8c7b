"""Segment-based center-of-mass tracking for depth-sensor body skeletons."""

__version__ = "0.1.0"
