"""Recommendation record shared by the analytics modules."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Recommendation:
    severity: str  # "high" | "medium" | "low" | "info"
    category: str
    message: str
    action: str
    files: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = {
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "action": self.action,
        }
        if self.files:
            data["files"] = list(self.files)
        return data
