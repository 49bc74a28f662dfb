"""Poisson and spatial logistic regression workflows for ecological survey data."""

__version__ = '0.1.0'
