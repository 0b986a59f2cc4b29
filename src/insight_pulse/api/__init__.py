"""HTTP API for Insight Pulse."""
