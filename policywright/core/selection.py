"""
Selection - Authoring-time state of the policy wizard
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Iterable

from .document import PolicyEffect, PolicyStatus


@dataclass
class ReferenceEntity:
    """A subject, action, resource or additional resource offered by the wizard"""

    id: str
    name: str = ""
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.name or self.id

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ReferenceEntity":
        return ReferenceEntity(
            id=data["id"],
            name=data.get("name") or "",
            display_name=data.get("displayName") or "",
        )


class ReferenceDirectory:
    """
    Display-name lookup for the entities a policy refers to.

    Unknown ids resolve to themselves, so a partially loaded directory
    still renders.
    """

    KINDS = ("subjects", "actions", "resources", "additional_resources")

    def __init__(
        self,
        subjects: Optional[Iterable[ReferenceEntity]] = None,
        actions: Optional[Iterable[ReferenceEntity]] = None,
        resources: Optional[Iterable[ReferenceEntity]] = None,
        additional_resources: Optional[Iterable[ReferenceEntity]] = None,
    ):
        self._entries: Dict[str, Dict[str, ReferenceEntity]] = {
            "subjects": {e.id: e for e in subjects or []},
            "actions": {e.id: e for e in actions or []},
            "resources": {e.id: e for e in resources or []},
            "additional_resources": {e.id: e for e in additional_resources or []},
        }

    def get(self, kind: str, entity_id: str) -> Optional[ReferenceEntity]:
        if kind not in self._entries:
            raise KeyError(f"Unknown reference kind: {kind}")
        return self._entries[kind].get(entity_id)

    def display_name(self, kind: str, entity_id: str) -> str:
        """Display name of an entity, falling back to its name and then its id"""
        entity = self.get(kind, entity_id)
        return entity.label if entity else entity_id


@dataclass
class SelectionState:
    """
    What the author has picked so far.

    Attribute maps are keyed by attribute id. Maps rebuilt from a
    persisted document may also hold attribute names for attributes the
    catalog no longer knows.
    """

    name: str = ""
    description: str = ""
    effect: PolicyEffect = PolicyEffect.ALLOW
    status: PolicyStatus = PolicyStatus.DRAFT
    subject_id: Optional[str] = None
    action_ids: List[str] = field(default_factory=list)
    resource_ids: List[str] = field(default_factory=list)
    subject_values: Dict[str, Any] = field(default_factory=dict)
    subject_operators: Dict[str, str] = field(default_factory=dict)
    resource_values: Dict[str, Any] = field(default_factory=dict)
    resource_operators: Dict[str, str] = field(default_factory=dict)
    additional_resource_ids: List[Any] = field(default_factory=list)
    additional_values: Dict[str, Any] = field(default_factory=dict)
    additional_operators: Dict[str, str] = field(default_factory=dict)

    def missing_parts(self) -> List[str]:
        """Selections a compile cannot proceed without"""
        missing = []
        if not self.subject_id:
            missing.append("subject")
        if not self.action_ids:
            missing.append("actions")
        if not self.resource_ids:
            missing.append("resources")
        return missing

    def is_complete(self) -> bool:
        return not self.missing_parts()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "effect": self.effect.value,
            "status": self.status.value,
            "subject": self.subject_id,
            "actions": list(self.action_ids),
            "resources": list(self.resource_ids),
            "subjectAttributes": dict(self.subject_values),
            "subjectOperators": dict(self.subject_operators),
            "resourceAttributes": dict(self.resource_values),
            "resourceOperators": dict(self.resource_operators),
            "additionalResources": list(self.additional_resource_ids),
            "additionalResourceAttributes": dict(self.additional_values),
            "additionalResourceOperators": dict(self.additional_operators),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SelectionState":
        return SelectionState(
            name=data.get("name") or "",
            description=data.get("description") or "",
            effect=PolicyEffect(data.get("effect", PolicyEffect.ALLOW.value)),
            status=PolicyStatus(data.get("status", PolicyStatus.DRAFT.value)),
            subject_id=data.get("subject"),
            action_ids=list(data.get("actions") or []),
            resource_ids=list(data.get("resources") or []),
            subject_values=dict(data.get("subjectAttributes") or {}),
            subject_operators=dict(data.get("subjectOperators") or {}),
            resource_values=dict(data.get("resourceAttributes") or {}),
            resource_operators=dict(data.get("resourceOperators") or {}),
            additional_resource_ids=list(data.get("additionalResources") or []),
            additional_values=dict(data.get("additionalResourceAttributes") or {}),
            additional_operators=dict(data.get("additionalResourceOperators") or {}),
        )
