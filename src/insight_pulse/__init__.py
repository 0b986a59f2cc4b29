"""Insight Pulse: typed reactions, popularity feed and contributor leaderboard."""

__version__ = "0.1.0"
