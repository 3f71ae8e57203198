"""
Issue Analysis Module - LLM summary, priority and routing for new reports
"""

from packages.domain.analysis.issue_analyzer import (
    IssueAnalyzer,
    department_for,
    map_category,
    map_priority,
    urgency_for,
)
from packages.domain.analysis.schemas import IssueAnalysis, IssueCategory, IssuePriority

__all__ = [
    'IssueAnalysis',
    'IssueAnalyzer',
    'IssueCategory',
    'IssuePriority',
    'department_for',
    'map_category',
    'map_priority',
    'urgency_for',
]
