"""Projection and advisory engine.

Pure functions: no I/O, no clock access, inputs are never modified.
"""
