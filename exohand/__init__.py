"""Kinematic hand animation driven by exoskeleton joint angles."""

__version__ = "0.1.0"
