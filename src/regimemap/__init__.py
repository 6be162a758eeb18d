"""Stellar equation-of-state regime map engine."""
