"""
policywright Core - Catalog, selection and document primitives
"""

from .attribute import (
    AttributeCategory,
    AttributeCatalog,
    AttributeConstraints,
    AttributeDefinition,
    DataType,
    has_category,
)
from .operators import (
    Operator,
    OPERATOR_DOMAINS,
    is_empty_value,
    operator_phrase,
    operators_for,
    resolve_operator,
)
from .document import (
    AdditionalResourceAttachment,
    AttributeCondition,
    PolicyDocument,
    PolicyEffect,
    PolicyStatus,
    Rule,
)
from .selection import ReferenceDirectory, ReferenceEntity, SelectionState

__all__ = [
    "AttributeCategory",
    "AttributeCatalog",
    "AttributeConstraints",
    "AttributeDefinition",
    "DataType",
    "has_category",
    "Operator",
    "OPERATOR_DOMAINS",
    "is_empty_value",
    "operator_phrase",
    "operators_for",
    "resolve_operator",
    "AdditionalResourceAttachment",
    "AttributeCondition",
    "PolicyDocument",
    "PolicyEffect",
    "PolicyStatus",
    "Rule",
    "ReferenceDirectory",
    "ReferenceEntity",
    "SelectionState",
]
