"""Serialization of the processed tree for the emission backend."""

from pathlib import Path
from typing import Any

import yaml

from bindprep.declaration import (
    ASTContext,
    Class,
    Declaration,
    Enumeration,
    EnumItem,
    Event,
    Function,
    Method,
)


def declaration_to_dict(decl: Declaration) -> dict[str, Any]:
    """Convert a declaration and its children to plain data."""
    out: dict[str, Any] = {
        "kind": decl.kind.value,
        "name": decl.name,
        "generation_kind": decl.generation_kind.value,
    }
    if decl.original_name != decl.name:
        out["original_name"] = decl.original_name
    if decl.explicitly_ignored:
        out["explicitly_ignored"] = True
    out["access"] = decl.access.value
    if decl.comment:
        out["comment"] = decl.comment

    if isinstance(decl, Class):
        out["type_kind"] = decl.type_kind.value
        if decl.bases:
            out["bases"] = list(decl.bases)
    if isinstance(decl, Function):
        out["return_type"] = decl.return_type
        out["parameters"] = [{"name": p.name, "type": p.type} for p in decl.parameters]
    if isinstance(decl, Method) and decl.is_operator:
        out["operator"] = decl.operator_kind.value
    if isinstance(decl, Event):
        out["synthesized"] = True
        out["origin"] = decl.origin
        if decl.source is not None:
            out["source"] = decl.source.name
    if isinstance(decl, EnumItem) and decl.value is not None:
        out["value"] = decl.value

    children = [declaration_to_dict(c) for c in decl.children()]
    if children:
        out["items" if isinstance(decl, Enumeration) else "declarations"] = children
    return out


def dump_declaration_tree(lib: ASTContext, path: Path) -> None:
    """Write the processed tree as YAML."""
    doc = {
        "stage": lib.stage.name.lower(),
        "translation_units": [
            {
                "file_path": unit.file_path,
                "generation_kind": unit.generation_kind.value,
                "declarations": [declaration_to_dict(d) for d in unit.children()],
            }
            for unit in lib.translation_units
        ],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(doc, sort_keys=False), encoding="utf-8")
