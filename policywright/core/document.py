"""
Document - The policy document handed to the external policy API
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum
import json


class PolicyEffect(Enum):
    """Outcome when a policy's conditions match"""

    ALLOW = "Allow"
    DENY = "Deny"


class PolicyStatus(Enum):
    """Lifecycle status of a persisted policy"""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DRAFT = "Draft"


@dataclass
class AttributeCondition:
    """A single {name, operator, value} constraint on a subject or resource"""

    name: str
    operator: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, (list, tuple)) else self.value
        return {"name": self.name, "operator": self.operator, "value": value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "AttributeCondition":
        return AttributeCondition(
            name=data["name"],
            operator=data.get("operator") or "",
            value=data.get("value"),
        )


def _conditions_from(items: Optional[List[Dict[str, Any]]]) -> List[AttributeCondition]:
    return [AttributeCondition.from_dict(item) for item in items or []]


@dataclass
class Rule:
    """
    One (action, resource) pairing with its attached conditions.

    Rules generated by one compile share the same subject and object
    condition lists.
    """

    id: str
    subject_type: str
    action_name: str
    action_display_name: str
    object_type: str
    subject_attributes: List[AttributeCondition] = field(default_factory=list)
    object_attributes: List[AttributeCondition] = field(default_factory=list)
    conditions: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject": {
                "type": self.subject_type,
                "attributes": [c.to_dict() for c in self.subject_attributes],
            },
            "action": {
                "name": self.action_name,
                "displayName": self.action_display_name,
            },
            "object": {
                "type": self.object_type,
                "attributes": [c.to_dict() for c in self.object_attributes],
            },
            "conditions": list(self.conditions),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Rule":
        subject = data.get("subject") or {}
        action = data.get("action") or {}
        obj = data.get("object") or {}
        return Rule(
            id=data.get("id", ""),
            subject_type=subject.get("type", ""),
            action_name=action.get("name", ""),
            action_display_name=action.get("displayName") or action.get("name", ""),
            object_type=obj.get("type", ""),
            subject_attributes=_conditions_from(subject.get("attributes")),
            object_attributes=_conditions_from(obj.get("attributes")),
            conditions=list(data.get("conditions") or []),
        )


@dataclass
class AdditionalResourceAttachment:
    """An additional resource exposed when the base policy matches"""

    id: str
    attributes: List[AttributeCondition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "attributes": [c.to_dict() for c in self.attributes]}

    @staticmethod
    def from_dict(data: Any) -> "AdditionalResourceAttachment":
        """Accepts the {id, attributes} shape or a bare id string"""
        if isinstance(data, str):
            return AdditionalResourceAttachment(id=data)
        return AdditionalResourceAttachment(
            id=data.get("id", ""),
            attributes=_conditions_from(data.get("attributes")),
        )


@dataclass
class PolicyDocument:
    """
    The normalized policy payload.

    This is the exact JSON contract exchanged with the policy API:
    produced on create/update and read back for editing.
    """

    name: str
    description: str = ""
    effect: PolicyEffect = PolicyEffect.ALLOW
    status: PolicyStatus = PolicyStatus.DRAFT
    subjects: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    rules: List[Rule] = field(default_factory=list)
    additional_resources: List[AdditionalResourceAttachment] = field(default_factory=list)
    conditions: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the policy API payload shape"""
        return {
            "name": self.name,
            "description": self.description,
            "effect": self.effect.value,
            "status": self.status.value,
            "subjects": list(self.subjects),
            "resources": list(self.resources),
            "actions": list(self.actions),
            "rules": [r.to_dict() for r in self.rules],
            "additionalResources": [a.to_dict() for a in self.additional_resources],
            "conditions": list(self.conditions),
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict(), indent=2)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PolicyDocument":
        """Build from a persisted payload, tolerating missing optional keys"""
        return PolicyDocument(
            name=data.get("name", ""),
            description=data.get("description") or "",
            effect=PolicyEffect(data.get("effect", PolicyEffect.ALLOW.value)),
            status=PolicyStatus(data.get("status", PolicyStatus.DRAFT.value)),
            subjects=list(data.get("subjects") or []),
            resources=list(data.get("resources") or []),
            actions=list(data.get("actions") or []),
            rules=[Rule.from_dict(r) for r in data.get("rules") or []],
            additional_resources=[
                AdditionalResourceAttachment.from_dict(a)
                for a in data.get("additionalResources") or []
            ],
            conditions=list(data.get("conditions") or []),
        )
