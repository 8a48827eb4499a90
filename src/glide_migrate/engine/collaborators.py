"""Inputs produced outside the engine: dependency and optimization analyses.

The orchestrator treats these as opaque. It only iterates dependency phases
and risks, and optimization recommendations, when merging them into a plan.
Both can be built from plain dictionaries (for example a parsed YAML or JSON
file); snake_case keys are preferred and camelCase keys are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from glide_migrate.engine.models import Severity
from glide_migrate.errors import InputError


def _get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InputError(f"{what} must be a list", value=repr(value))
    return value


def _as_mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InputError(f"{what} must be an object", value=repr(value))
    return value


def _action_text(action: Any) -> str:
    """Plain-text form of a phase action (string or action object)."""
    if isinstance(action, dict):
        return str(_get(action, "description", "command", "target", default=""))
    return str(action)


@dataclass
class DependencyPhase:
    """One phase of an externally computed dependency migration plan."""

    name: str
    order: int = 0
    actions: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyPhase:
        data = _as_mapping(data, "Dependency phase")
        if "name" not in data:
            raise InputError("Dependency phase is missing required field: name")
        try:
            order = int(_get(data, "order", default=0))
        except (TypeError, ValueError) as e:
            raise InputError(f"Invalid phase order: {data.get('order')!r}") from e
        return cls(
            name=str(data["name"]),
            order=order,
            actions=[_action_text(a) for a in _as_list(_get(data, "actions"), "Phase actions")],
            dependencies=[str(d) for d in _as_list(_get(data, "dependencies"), "Phase dependencies")],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "order": self.order,
            "actions": self.actions,
            "dependencies": self.dependencies,
        }


@dataclass
class DependencyRisk:
    """A risk reported by dependency analysis."""

    dependency: str
    risk: str
    probability: Severity = Severity.MEDIUM
    impact: Severity = Severity.MEDIUM
    mitigation: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyRisk:
        data = _as_mapping(data, "Dependency risk")
        return cls(
            dependency=str(_get(data, "dependency", default="")),
            risk=str(_get(data, "risk", default="")),
            probability=Severity.parse(_get(data, "probability"), default=Severity.MEDIUM),
            impact=Severity.parse(_get(data, "impact"), default=Severity.MEDIUM),
            mitigation=str(_get(data, "mitigation", default="")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dependency": self.dependency,
            "risk": self.risk,
            "probability": self.probability.value,
            "impact": self.impact.value,
            "mitigation": self.mitigation,
        }


@dataclass
class DependencyAnalysis:
    """Dependency-manifest analysis supplied by a collaborator."""

    phases: list[DependencyPhase] = field(default_factory=list)
    risks: list[DependencyRisk] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DependencyAnalysis:
        """Build from ``{"migration_plan": {"phases": [...], "risks": [...]}}``."""
        if data is None:
            return cls()
        data = _as_mapping(data, "Dependency analysis")
        plan = _as_mapping(_get(data, "migration_plan", "migrationPlan", default={}), "migration_plan")
        return cls(
            phases=[DependencyPhase.from_dict(p) for p in _as_list(_get(plan, "phases"), "phases")],
            risks=[DependencyRisk.from_dict(r) for r in _as_list(_get(plan, "risks"), "risks")],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "migration_plan": {
                "phases": [p.to_dict() for p in self.phases],
                "risks": [r.to_dict() for r in self.risks],
            }
        }


@dataclass
class OptimizationRecommendation:
    """A prioritized recommendation from optimization/compatibility analysis."""

    title: str
    description: str = ""
    priority: Severity = Severity.MEDIUM
    action_items: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OptimizationRecommendation:
        data = _as_mapping(data, "Recommendation")
        if "title" not in data:
            raise InputError("Recommendation is missing required field: title")
        items = _get(data, "action_items", "actionItems", "implementation_steps", "implementationSteps")
        return cls(
            title=str(data["title"]),
            description=str(_get(data, "description", default="")),
            priority=Severity.parse(_get(data, "priority"), default=Severity.MEDIUM),
            action_items=[str(i) for i in _as_list(items, "action_items")],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "action_items": self.action_items,
        }


@dataclass
class OptimizationReport:
    """Optimization/compatibility analysis supplied by a collaborator."""

    recommendations: list[OptimizationRecommendation] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> OptimizationReport:
        """Build from ``{"recommendations": [...]}``."""
        if data is None:
            return cls()
        data = _as_mapping(data, "Optimization report")
        items = _get(
            data,
            "recommendations",
            "performance_optimizations",
            "performanceOptimizations",
        )
        return cls(
            recommendations=[
                OptimizationRecommendation.from_dict(r) for r in _as_list(items, "recommendations")
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"recommendations": [r.to_dict() for r in self.recommendations]}


def load_collaborator_file(path: Path) -> dict[str, Any] | None:
    """Read a YAML or JSON collaborator file.

    Raises:
        InputError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Failed to read file: {e}", file_path=str(path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise InputError(f"Invalid YAML/JSON: {e}", file_path=str(path)) from e

    if data is not None and not isinstance(data, dict):
        raise InputError("Collaborator file must contain an object", file_path=str(path))
    return data
