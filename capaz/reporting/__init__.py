"""Aggregation views over current assessments."""
