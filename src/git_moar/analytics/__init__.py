"""Derived analytics over an attributed commit sequence."""

from .classifier import (
    Category,
    classify,
    commit_patterns,
    extract_issue_references,
    message_quality,
    referenced_issues,
    type_breakdown,
    type_stats,
)
from .hotspots import (
    FileHotspot,
    RiskLevel,
    detect_hotspots,
    file_type_volatility,
    frequently_changed_files,
    high_churn_files,
    hotspot_recommendations,
    hotspot_stats,
    knowledge_silos,
    refactor_candidates,
    risk_level,
    risk_points,
)
from .productivity import (
    ProductivityInsights,
    productivity_insights,
    productivity_recommendations,
    time_to_value,
)
from .quality import (
    QualityMetrics,
    calculate_quality_metrics,
    health_rating,
    health_recommendations,
    health_score,
    technical_debt,
)
from .recommendations import Recommendation

__all__ = [
    "Category",
    "FileHotspot",
    "ProductivityInsights",
    "QualityMetrics",
    "Recommendation",
    "RiskLevel",
    "calculate_quality_metrics",
    "classify",
    "commit_patterns",
    "detect_hotspots",
    "extract_issue_references",
    "file_type_volatility",
    "frequently_changed_files",
    "health_rating",
    "health_recommendations",
    "health_score",
    "high_churn_files",
    "hotspot_recommendations",
    "hotspot_stats",
    "knowledge_silos",
    "message_quality",
    "productivity_insights",
    "productivity_recommendations",
    "referenced_issues",
    "refactor_candidates",
    "risk_level",
    "risk_points",
    "technical_debt",
    "time_to_value",
    "type_breakdown",
    "type_stats",
]
