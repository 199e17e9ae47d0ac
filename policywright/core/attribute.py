"""
Attribute - Catalog of attribute definitions used in policy conditions
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, FrozenSet, Iterable, Iterator
from enum import Enum


class AttributeCategory(Enum):
    """Where an attribute may be attached in a policy"""

    SUBJECT = "subject"
    RESOURCE = "resource"
    ADDITIONAL_RESOURCE = "additional-resource"
    ENVIRONMENT = "environment"


class DataType(Enum):
    """Declared value type of an attribute"""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"


@dataclass
class AttributeConstraints:
    """Value constraints declared on an attribute"""

    enum_values: List[Any] = field(default_factory=list)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.enum_values:
            result["enumValues"] = list(self.enum_values)
        for key, value in (
            ("minValue", self.min_value),
            ("maxValue", self.max_value),
            ("pattern", self.pattern),
            ("minLength", self.min_length),
            ("maxLength", self.max_length),
        ):
            if value is not None:
                result[key] = value
        return result

    @staticmethod
    def from_dict(data: Optional[Dict[str, Any]]) -> "AttributeConstraints":
        data = data or {}
        return AttributeConstraints(
            enum_values=list(data.get("enumValues") or []),
            min_value=data.get("minValue"),
            max_value=data.get("maxValue"),
            pattern=data.get("pattern"),
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
        )


@dataclass
class AttributeDefinition:
    """
    A single attribute from the external catalog.

    Read-only to the compiler. `data_type` keeps the raw catalog string so
    that unknown types survive loading; operator resolution decides what
    an unknown type means.
    """

    id: str
    name: str
    display_name: str
    data_type: str = DataType.STRING.value
    categories: FrozenSet[str] = field(default_factory=frozenset)
    is_multi_value: bool = False
    is_required: bool = False
    constraints: AttributeConstraints = field(default_factory=AttributeConstraints)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Attribute id cannot be empty")
        if not self.name:
            raise ValueError(f"Attribute {self.id} must have a name")
        if not self.display_name:
            self.display_name = self.name
        self.categories = frozenset(self.categories)

    def has_category(self, category) -> bool:
        """Check whether this attribute is tagged with a category"""
        if isinstance(category, AttributeCategory):
            category = category.value
        return category in self.categories

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "displayName": self.display_name,
            "categories": sorted(self.categories),
            "dataType": self.data_type,
            "isMultiValue": self.is_multi_value,
            "isRequired": self.is_required,
            "constraints": self.constraints.to_dict(),
        }


def has_category(attribute: AttributeDefinition, category) -> bool:
    """Predicate form of AttributeDefinition.has_category"""
    return attribute.has_category(category)


class AttributeCatalog:
    """
    Ordered, read-only collection of attribute definitions.

    Lookups are by id (compile) or by name-or-id (hydration).
    """

    def __init__(self, attributes: Optional[Iterable[AttributeDefinition]] = None):
        self._attributes: List[AttributeDefinition] = list(attributes or [])
        self._by_id: Dict[str, AttributeDefinition] = {}
        for attribute in self._attributes:
            self._by_id.setdefault(attribute.id, attribute)

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, attribute_id: str) -> bool:
        return attribute_id in self._by_id

    def get(self, attribute_id: str) -> Optional[AttributeDefinition]:
        """Get an attribute by id"""
        return self._by_id.get(attribute_id)

    def find(self, name_or_id: str) -> Optional[AttributeDefinition]:
        """Get the first attribute whose name or id equals the key"""
        return next(
            (a for a in self._attributes if a.name == name_or_id or a.id == name_or_id),
            None,
        )

    def for_category(self, category) -> "AttributeCatalog":
        """Sub-catalog of attributes tagged with a category"""
        return AttributeCatalog(a for a in self._attributes if a.has_category(category))
