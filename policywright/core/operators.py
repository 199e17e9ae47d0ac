"""
Operators - Data-type aware operator resolution for attribute conditions
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum

from .attribute import AttributeDefinition, DataType

logger = logging.getLogger(__name__)


class Operator(Enum):
    """Comparison applied between a runtime attribute value and a condition value"""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    INCLUDES = "includes"
    NOT_INCLUDES = "not_includes"
    IN = "in"
    NOT_IN = "not_in"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"


# Selectable operators per data type, first entry is the default
OPERATOR_DOMAINS: Dict[DataType, Tuple[Operator, ...]] = {
    DataType.ARRAY: (Operator.INCLUDES, Operator.NOT_INCLUDES),
    DataType.NUMBER: (
        Operator.EQUALS,
        Operator.NOT_EQUALS,
        Operator.GREATER_THAN,
        Operator.LESS_THAN,
        Operator.GREATER_THAN_OR_EQUAL,
        Operator.LESS_THAN_OR_EQUAL,
    ),
    DataType.STRING: (Operator.EQUALS, Operator.NOT_EQUALS, Operator.CONTAINS),
    DataType.BOOLEAN: (Operator.IN,),
    DataType.DATE: (Operator.IN,),
    DataType.OBJECT: (Operator.IN,),
}

OPERATOR_LABELS: Dict[Operator, str] = {
    Operator.EQUALS: "Equals",
    Operator.NOT_EQUALS: "Not Equals",
    Operator.CONTAINS: "Contains",
    Operator.NOT_CONTAINS: "Not Contains",
    Operator.INCLUDES: "Includes",
    Operator.NOT_INCLUDES: "Not Includes",
    Operator.IN: "In",
    Operator.NOT_IN: "Not In",
    Operator.GREATER_THAN: "Greater Than",
    Operator.LESS_THAN: "Less Than",
    Operator.GREATER_THAN_OR_EQUAL: "Greater Than or Equals",
    Operator.LESS_THAN_OR_EQUAL: "Less Than or Equals",
}

OPERATOR_PHRASES: Dict[str, str] = {
    Operator.INCLUDES.value: "includes",
    Operator.NOT_INCLUDES.value: "does not include",
    Operator.EQUALS.value: "is",
    Operator.NOT_EQUALS.value: "is not",
    Operator.CONTAINS.value: "contains",
    Operator.NOT_CONTAINS.value: "does not contain",
    Operator.IN.value: "is one of",
    Operator.NOT_IN.value: "is not one of",
    Operator.GREATER_THAN.value: "is greater than",
    Operator.LESS_THAN.value: "is less than",
    Operator.GREATER_THAN_OR_EQUAL.value: "is greater than or equal to",
    Operator.LESS_THAN_OR_EQUAL.value: "is less than or equal to",
}

# Used when the data type is not one the catalog schema knows about
UNKNOWN_TYPE_DEFAULT = Operator.EQUALS


def is_sequence_value(value: Any) -> bool:
    """Lists and tuples count as multi-valued; strings do not"""
    return isinstance(value, (list, tuple))


def is_empty_value(value: Any) -> bool:
    """A condition value that should not produce a condition"""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if is_sequence_value(value):
        return len(value) == 0
    return False


def parse_data_type(raw: Optional[str]) -> Optional[DataType]:
    """Map a raw catalog data type to DataType, None when unknown"""
    try:
        return DataType(raw)
    except ValueError:
        return None


def operator_domain(attribute: AttributeDefinition, value: Any = None) -> Tuple[Operator, ...]:
    """
    Resolve the operator domain for an attribute and condition value.

    Array attributes always use the includes family. Otherwise a
    sequence value narrows the domain to `in`, whatever the declared type.
    Unknown types get a single-entry domain holding the fallback operator.
    """
    data_type = parse_data_type(attribute.data_type)

    if data_type is DataType.ARRAY:
        return OPERATOR_DOMAINS[DataType.ARRAY]

    if is_sequence_value(value):
        return (Operator.IN,)

    if data_type is None:
        return (UNKNOWN_TYPE_DEFAULT,)

    return OPERATOR_DOMAINS[data_type]


def resolve_operator(
    attribute: AttributeDefinition,
    value: Any = None,
    chosen: Optional[str] = None,
) -> Operator:
    """
    Resolve the canonical operator for a condition.

    Args:
        attribute: Definition of the attribute being constrained
        value: Condition value (sequence values force `in` for non-array types)
        chosen: Operator the author picked, if any

    Returns:
        An operator from the resolved domain. A choice outside the domain
        falls back to the domain default.
    """
    domain = operator_domain(attribute, value)
    default = domain[0]

    if not chosen:
        return default

    for operator in domain:
        if operator.value == chosen:
            return operator

    logger.debug(
        "Operator %r not valid for attribute %s (%s); using %s",
        chosen,
        attribute.id,
        attribute.data_type,
        default.value,
    )
    return default


def operator_phrase(operator) -> str:
    """Human-readable phrase for an operator (unknown operators read as 'is')"""
    if isinstance(operator, Operator):
        operator = operator.value
    return OPERATOR_PHRASES.get(operator, "is")


def operators_for(attribute: AttributeDefinition) -> List[Dict[str, str]]:
    """Selectable operators for an attribute, as value/label pairs"""
    return [{"value": op.value, "label": OPERATOR_LABELS[op]} for op in operator_domain(attribute)]
