"""Flite: a local batch photo editor with tonal sliders and tone curves."""

__version__ = "0.1.0"
