from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List

@dataclass
class PlanAction:
    action: str
    target: str
    detail: str
    values: Dict[str, str]
    will_change: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class UpdatePlan:
    policy: str
    candidate: Dict[str, Any]
    actions: List[PlanAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "candidate": dict(self.candidate),
            "actions": [a.to_dict() for a in self.actions],
        }
