"""Adaptive conversation engine."""
