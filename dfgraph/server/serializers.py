"""
Component serializer.

Converts descriptors and the category tree into JSON-safe dicts in the
camelCase shape the editor's sidebar and form renderer expect.
"""
from __future__ import annotations

from typing import Any, Dict, List

from dfgraph.core.descriptor import FieldSpec, NodeDescriptor
from dfgraph.registry import CategoryTree

# SerializedField keys: id, type, label, required, options, minimum, maximum,
#                       minItems, placeholder, tooltip, inputSlot, advanced, nullable,
#                       condition {dependsOn, visibleWhen}
# SerializedComponent keys: id, name, description, category, subcategory, icon,
#                           kind, minInputs, maxInputs, outputs, defaultConfig,
#                           formSchema


def serialize_field(spec: FieldSpec) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": spec.id,
        "type": spec.type.value,
        "label": spec.label,
        "required": spec.required,
        "options": list(spec.options),
        "minimum": spec.minimum,
        "maximum": spec.maximum,
        "minItems": spec.min_items,
        "placeholder": spec.placeholder,
        "tooltip": spec.tooltip,
        "inputSlot": spec.input_slot,
        "advanced": spec.advanced,
        "nullable": spec.nullable,
        "condition": None,
    }
    if spec.condition is not None:
        data["condition"] = {
            "dependsOn": spec.condition.depends_on,
            # frozenset → list, sorted for stable output
            "visibleWhen": sorted(spec.condition.values, key=str),
        }
    return data


def serialize_descriptor(descriptor: NodeDescriptor, with_form: bool = True) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": descriptor.id,
        "name": descriptor.display_name,
        "description": descriptor.description,
        "category": descriptor.category,
        "subcategory": descriptor.subcategory,
        "icon": descriptor.icon,
        "kind": descriptor.kind.value,
        "minInputs": descriptor.kind.min_inputs,
        "maxInputs": descriptor.kind.max_inputs,
        "outputs": descriptor.output_arity,
    }
    if with_form:
        data["defaultConfig"] = dict(descriptor.default_config)
        data["formSchema"] = [serialize_field(f) for f in descriptor.form_schema]
    return data


def serialize_tree(tree: CategoryTree) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    return {
        category: {
            group: [serialize_descriptor(d, with_form=False) for d in descriptors]
            for group, descriptors in groups.items()
        }
        for category, groups in tree.items()
    }
