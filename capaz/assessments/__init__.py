"""Versioned assessment snapshots."""

from capaz.assessments.snapshots import AssessmentHistory, parse_submission

__all__ = ["AssessmentHistory", "parse_submission"]
