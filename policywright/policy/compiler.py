"""
Policy Compiler - Selection state to normalized policy documents

Design principles:
- One rule per (action, resource) pair, nothing more
- Condition lists are built once per compile and shared by every rule
- Stale catalog references are skipped, never fatal
- Invalid operators fall back to the data type default
- An incomplete selection is refused, never half-compiled
"""

import logging
import time
import uuid
from typing import List, Dict, Any, Optional, Callable

from policywright.config import get_config
from policywright.core import (
    AdditionalResourceAttachment,
    AttributeCatalog,
    AttributeCondition,
    PolicyDocument,
    ReferenceDirectory,
    Rule,
    SelectionState,
    is_empty_value,
    resolve_operator,
)
from policywright.policy.renderer import format_value

logger = logging.getLogger(__name__)


class PolicyCompilationError(Exception):
    """Raised when a selection cannot be compiled into a policy document"""

    pass


class IncompleteSelectionError(PolicyCompilationError):
    """
    Raised when the selection would produce an empty rule set.

    `missing` names the absent parts ("subject", "actions", "resources")
    so the caller can block submission and point at the right step.
    """

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Incomplete selection: missing {', '.join(self.missing)}")


class PolicyCompiler:
    """
    Compiles wizard selections into PolicyDocument objects.

    The compiler holds no state between compiles. Running it twice on the
    same selection gives the same document apart from the timestamp
    embedded in rule ids.
    """

    def __init__(
        self,
        catalog: AttributeCatalog,
        references: Optional[ReferenceDirectory] = None,
        clock: Optional[Callable[[], float]] = None,
        rule_id_strategy: Optional[str] = None,
    ):
        """
        Args:
            catalog: Attribute definitions used to resolve condition ids
            references: Display names for actions (defaults to raw ids)
            clock: Returns epoch seconds, used for timestamp rule ids
            rule_id_strategy: "timestamp" or "uuid" (defaults to config)
        """
        self.catalog = catalog
        self.references = references or ReferenceDirectory()
        self.clock = clock or time.time
        self.rule_id_strategy = rule_id_strategy or get_config().rule_id_strategy

    def compile(self, selection: SelectionState) -> PolicyDocument:
        """
        Compile a selection into a policy document.

        Raises:
            IncompleteSelectionError: If subject, actions or resources are missing
        """
        missing = selection.missing_parts()
        if missing:
            raise IncompleteSelectionError(missing)

        rules = self.expand_rules(selection)
        if not rules:
            raise IncompleteSelectionError(["actions", "resources"])

        additional = self.attach_additional_resources(selection)
        document = self.assemble(selection, rules, additional)

        logger.info(
            "Compiled policy %r: %d rules, %d additional resources",
            document.name,
            len(document.rules),
            len(document.additional_resources),
        )
        return document

    def build_conditions(
        self,
        values: Dict[str, Any],
        operators: Optional[Dict[str, str]] = None,
    ) -> List[AttributeCondition]:
        """
        Turn an attribute-id → value map into attribute conditions.

        Empty values are dropped. Ids missing from the catalog are
        skipped (the attribute was probably deleted after selection).
        """
        operators = operators or {}
        conditions = []

        for attribute_id, value in values.items():
            if is_empty_value(value):
                continue

            attribute = self.catalog.get(attribute_id)
            if attribute is None:
                logger.debug("Skipping unknown attribute reference: %s", attribute_id)
                continue

            operator = resolve_operator(attribute, value, operators.get(attribute_id))
            conditions.append(
                AttributeCondition(name=attribute.name, operator=operator.value, value=value)
            )

        return conditions

    def expand_rules(self, selection: SelectionState) -> List[Rule]:
        """
        Build the action × resource cross product of rules.

        Rule i*M+j pairs action i with resource j. Returns an empty list
        when either side is empty.
        """
        actions = selection.action_ids
        resources = selection.resource_ids
        if not actions or not resources:
            return []

        subject_attributes = self.build_conditions(
            selection.subject_values, selection.subject_operators
        )
        object_attributes = self.build_conditions(
            selection.resource_values, selection.resource_operators
        )
        prefix = self._rule_id_prefix()

        rules = []
        for i, action_id in enumerate(actions):
            display_name = self.references.display_name("actions", action_id)
            for j, resource_id in enumerate(resources):
                rules.append(
                    Rule(
                        id=f"{prefix}-{i * len(resources) + j}",
                        subject_type=selection.subject_id or "",
                        action_name=action_id,
                        action_display_name=display_name,
                        object_type=resource_id,
                        subject_attributes=subject_attributes,
                        object_attributes=object_attributes,
                    )
                )

        return rules

    def attach_additional_resources(
        self, selection: SelectionState
    ) -> List[AdditionalResourceAttachment]:
        """
        Attach the shared condition set to every selected additional resource.

        An attachment without conditions is still emitted: it makes the
        resource available whenever the base policy matches.
        """
        resource_ids = []
        for resource_id in selection.additional_resource_ids:
            if isinstance(resource_id, str) and resource_id.strip():
                resource_ids.append(resource_id)
            else:
                logger.debug("Dropping invalid additional resource id: %r", resource_id)

        if not resource_ids:
            return []

        attributes = self.build_conditions(
            selection.additional_values, selection.additional_operators
        )
        return [
            AdditionalResourceAttachment(id=resource_id, attributes=attributes)
            for resource_id in resource_ids
        ]

    def assemble(
        self,
        selection: SelectionState,
        rules: List[Rule],
        additional_resources: List[AdditionalResourceAttachment],
    ) -> PolicyDocument:
        """Merge metadata, rules and attachments into a PolicyDocument"""
        return PolicyDocument(
            name=(selection.name or "").strip(),
            description=(selection.description or "").strip(),
            effect=selection.effect,
            status=selection.status,
            subjects=[selection.subject_id] if selection.subject_id else [],
            resources=list(selection.resource_ids),
            actions=list(selection.action_ids),
            rules=rules,
            additional_resources=additional_resources,
            conditions=[],
        )

    def explain(self, document: PolicyDocument, rule_id: str) -> Optional[str]:
        """
        Generate a line-by-line explanation of one compiled rule.

        Args:
            document: Compiled or persisted policy document
            rule_id: Rule ID to explain

        Returns:
            Human-readable explanation or None if not found
        """
        rule = next((r for r in document.rules if r.id == rule_id), None)
        if not rule:
            return None

        lines = []
        lines.append(f"Rule: {rule.id}")
        lines.append(f"Effect: {document.effect.value}")
        lines.append(f"Subject: {rule.subject_type}")
        lines.append(f"Action: {rule.action_display_name} ({rule.action_name})")
        lines.append(f"Object: {rule.object_type}")

        if rule.subject_attributes:
            lines.append("")
            lines.append("Subject conditions:")
            for condition in rule.subject_attributes:
                lines.append(f"  - {condition.name} {condition.operator} {format_value(condition.value)}")

        if rule.object_attributes:
            lines.append("")
            lines.append("Object conditions:")
            for condition in rule.object_attributes:
                lines.append(f"  - {condition.name} {condition.operator} {format_value(condition.value)}")

        return "\n".join(lines)

    def _rule_id_prefix(self) -> str:
        if self.rule_id_strategy == "uuid":
            return f"rule-{uuid.uuid4().hex}"
        return f"rule-{int(self.clock() * 1000)}"
