"""
Wonbyte - learning-progress ledger for Korean reading-comprehension practice.

Tracks study stats and streaks, a personal vocabulary list, a wrong-answer
notebook, bookmarked passages, game rewards and the learner profile.
"""

__version__ = "0.1.0"
