"""
Policy Hydrator - Rebuild selection state from a persisted policy document

The authoring model writes identical conditions into every rule and every
additional resource, so only rules[0] and additionalResources[0] are read.
Documents written elsewhere with per-rule differences lose them here.
"""

import logging
from typing import List, Dict, Any, Tuple

from policywright.core import (
    AttributeCatalog,
    AttributeCategory,
    AttributeCondition,
    PolicyDocument,
    SelectionState,
)

logger = logging.getLogger(__name__)


class PolicyHydrator:
    """Reconstructs wizard selections for the edit flow"""

    def __init__(self, catalog: AttributeCatalog):
        self.catalog = catalog

    def hydrate(self, document: PolicyDocument) -> SelectionState:
        """
        Build the SelectionState a document was compiled from.

        Conditions whose attribute is no longer in the catalog are kept,
        keyed by their persisted name.
        """
        selection = SelectionState(
            name=document.name,
            description=document.description,
            effect=document.effect,
            status=document.status,
            action_ids=list(document.actions),
            resource_ids=list(document.resources),
        )

        if document.rules:
            first_rule = document.rules[0]
            selection.subject_id = first_rule.subject_type
            selection.subject_values, selection.subject_operators = self._condition_maps(
                first_rule.subject_attributes, AttributeCategory.SUBJECT
            )
            selection.resource_values, selection.resource_operators = self._condition_maps(
                first_rule.object_attributes, AttributeCategory.RESOURCE
            )
        elif document.subjects:
            selection.subject_id = document.subjects[0]

        if document.additional_resources:
            selection.additional_resource_ids = [a.id for a in document.additional_resources]
            (
                selection.additional_values,
                selection.additional_operators,
            ) = self._condition_maps(
                document.additional_resources[0].attributes,
                AttributeCategory.ADDITIONAL_RESOURCE,
            )

        return selection

    def _condition_maps(
        self,
        conditions: List[AttributeCondition],
        category: AttributeCategory,
    ) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """Value and operator maps keyed by attribute id (or name when unmatched)"""
        preferred = self.catalog.for_category(category)
        values: Dict[str, Any] = {}
        operators: Dict[str, str] = {}

        for condition in conditions:
            attribute = preferred.find(condition.name) or self.catalog.find(condition.name)
            if attribute is not None:
                key = attribute.id
            else:
                logger.debug(
                    "Attribute %r not in catalog; keeping it by name", condition.name
                )
                key = condition.name

            values[key] = condition.value
            if condition.operator:
                operators[key] = condition.operator

        return values, operators
