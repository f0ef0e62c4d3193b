from .contract import CodeWriter, Fragment, HelperFunction, NodeContract
from .descriptor import FieldSpec, NodeDescriptor, VisibleWhen, validate_config, visible_fields
from .types import FieldType, NodeKind

__all__ = [
    "CodeWriter",
    "FieldSpec",
    "FieldType",
    "Fragment",
    "HelperFunction",
    "NodeContract",
    "NodeDescriptor",
    "NodeKind",
    "VisibleWhen",
    "validate_config",
    "visible_fields",
]
