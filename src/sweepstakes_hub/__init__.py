"""Sweepstakes Hub: competition listing and admin portal backend."""

__version__ = "0.1.0"
