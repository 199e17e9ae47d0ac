"""
Policy Renderer - Plain English summaries of policies

Rendered text is for display only. Nothing reads it back; the edit flow
always hydrates from the structured document.
"""

from typing import List, Dict, Any, Optional, Callable, Iterable

from policywright.config import get_config
from policywright.core import (
    AttributeCatalog,
    AttributeCondition,
    PolicyDocument,
    PolicyEffect,
    ReferenceDirectory,
    Rule,
    SelectionState,
    is_empty_value,
    operator_phrase,
    resolve_operator,
)


def join_list(items: Iterable[Any], stringify: Callable[[Any], str] = str) -> str:
    """
    Join items as an English list.

    [] -> "", [A] -> "A", [A, B] -> "A and B", [A, B, C] -> "A, B, and C"
    """
    words = [stringify(item) for item in items]
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    if len(words) == 2:
        return f"{words[0]} and {words[1]}"
    return f"{', '.join(words[:-1])}, and {words[-1]}"


def format_value(value: Any) -> str:
    """Render a condition value; sequences read as alternatives"""
    if isinstance(value, (list, tuple)):
        return " or ".join(format_value(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def effect_verb(effect: PolicyEffect) -> str:
    return "ALLOWS" if effect == PolicyEffect.ALLOW else "DENIES"


class PolicyRenderer:
    """Renders selections and persisted documents as one English sentence"""

    def __init__(
        self,
        catalog: Optional[AttributeCatalog] = None,
        references: Optional[ReferenceDirectory] = None,
    ):
        self.catalog = catalog or AttributeCatalog()
        self.references = references or ReferenceDirectory()

    def render(self, selection: SelectionState) -> str:
        """
        Render the review sentence for a selection.

        This policy ALLOWS <subject> (when ...) to perform <actions> actions
        on <resources> (where ...) if <additional resources> (when ...).
        """
        subject = self.references.display_name("subjects", selection.subject_id or "")
        subject_conditions = self.condition_phrases(
            selection.subject_values, selection.subject_operators
        )
        resource_conditions = self.condition_phrases(
            selection.resource_values, selection.resource_operators
        )

        text = f"This policy {effect_verb(selection.effect)} {subject}"
        if subject_conditions:
            text += f" (when {join_list(subject_conditions)})"

        actions = join_list(
            selection.action_ids,
            lambda action_id: self.references.display_name("actions", action_id).lower(),
        )
        resources = join_list(
            selection.resource_ids,
            lambda resource_id: self.references.display_name("resources", resource_id),
        )
        text += f" to perform {actions} actions on {resources}"
        if resource_conditions:
            text += f" (where {join_list(resource_conditions)})"

        additional_ids = [
            r for r in selection.additional_resource_ids if isinstance(r, str) and r.strip()
        ]
        if additional_ids:
            text += " if " + join_list(
                additional_ids,
                lambda resource_id: self.references.display_name(
                    "additional_resources", resource_id
                ),
            )
            additional_conditions = self.condition_phrases(
                selection.additional_values, selection.additional_operators
            )
            if additional_conditions:
                text += f" (when {join_list(additional_conditions)})"

        return text + "."

    def condition_phrases(
        self,
        values: Dict[str, Any],
        operators: Optional[Dict[str, str]] = None,
    ) -> List[str]:
        """
        Phrase each selected condition as '<attribute> <operator> <value>'.

        Attributes missing from the catalog have no display name and are
        left out.
        """
        operators = operators or {}
        phrases = []
        for attribute_id, value in values.items():
            if is_empty_value(value):
                continue
            attribute = self.catalog.get(attribute_id)
            if attribute is None:
                continue
            operator = resolve_operator(attribute, value, operators.get(attribute_id))
            phrases.append(
                f"{attribute.display_name.lower()} {operator_phrase(operator)} {format_value(value)}"
            )
        return phrases

    def render_document(self, document: PolicyDocument) -> str:
        """
        Summarize a persisted policy document.

        Uses the rules when present, otherwise the flat subjects, actions
        and resources arrays.
        """
        effect = effect_verb(document.effect)

        if document.rules:
            summary = f"This policy {effect} " + "; ".join(
                self._rule_phrase(rule) for rule in document.rules
            )
            if document.additional_resources:
                summary += f" if {self._attachments_phrase(document)}"
            return summary + "."

        subjects = join_list(
            document.subjects, lambda s: self.references.display_name("subjects", s)
        ) or "All users"
        actions = join_list(
            document.actions, lambda a: self.references.display_name("actions", a).lower()
        ) or "any action"
        resources = join_list(
            document.resources, lambda r: self.references.display_name("resources", r)
        ) or "any resource"

        summary = f"This policy {effect} {subjects} to perform {actions} actions on {resources}"
        if document.additional_resources:
            summary += f" and on additional resources {self._attachments_phrase(document)}"
        return summary + "."

    def render_short_summary(
        self, document: PolicyDocument, max_length: Optional[int] = None
    ) -> str:
        """Document summary cut to max_length characters, ending in '...'"""
        if max_length is None:
            max_length = get_config().summary_max_length
        summary = self.render_document(document)
        if len(summary) <= max_length:
            return summary
        return summary[: max(max_length - 3, 0)] + "..."

    def _rule_phrase(self, rule: Rule) -> str:
        subject = self.references.display_name("subjects", rule.subject_type)
        conditions = self._persisted_phrases(rule.subject_attributes)
        if conditions:
            subject += f" (when {conditions})"

        action = (rule.action_display_name or rule.action_name).lower()

        obj = self.references.display_name("resources", rule.object_type)
        conditions = self._persisted_phrases(rule.object_attributes)
        if conditions:
            obj += f" (where {conditions})"

        return f"{subject} to perform {action} actions on {obj}"

    def _attachments_phrase(self, document: PolicyDocument) -> str:
        def phrase(attachment):
            text = self.references.display_name("additional_resources", attachment.id)
            conditions = self._persisted_phrases(attachment.attributes)
            if conditions:
                text += f" ({conditions})"
            return text

        return join_list(document.additional_resources, phrase)

    def _persisted_phrases(self, conditions: List[AttributeCondition]) -> str:
        phrases = []
        for condition in conditions:
            if is_empty_value(condition.value):
                continue
            attribute = self.catalog.find(condition.name)
            label = attribute.display_name if attribute else condition.name
            phrases.append(
                f"{label.lower()} {operator_phrase(condition.operator)} {format_value(condition.value)}"
            )
        return join_list(phrases)
