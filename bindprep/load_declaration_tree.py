"""Logic for loading the parser's declaration dump into a tree."""

from pathlib import Path
from typing import Any

import yaml

from bindprep.declaration import (
    INVALID_FILE_PATH,
    AccessSpecifier,
    ASTContext,
    Class,
    CxxOperatorKind,
    Declaration,
    DeclarationContext,
    Delegate,
    EnumItem,
    Enumeration,
    Field,
    Function,
    Method,
    Namespace,
    Parameter,
    Property,
    TranslationUnit,
    Variable,
)
from bindprep.errors import ConfigurationError


def _parameters(raw: dict[str, Any]) -> list[Parameter]:
    return [
        Parameter(name=str(p.get("name") or ""), type=str(p.get("type") or ""))
        for p in raw.get("parameters") or []
    ]


def _common(raw: dict[str, Any]) -> dict[str, Any]:
    """Attributes shared by every declaration kind."""
    return {
        "name": str(raw.get("name") or ""),
        "original_name": str(raw.get("original_name") or ""),
        "access": AccessSpecifier(raw.get("access") or "public"),
        "comment": raw.get("comment"),
    }


def build_declaration(raw: dict[str, Any], source: str = "<dump>") -> Declaration:
    """Build one declaration (and its children) from its dump record."""
    kind = raw.get("kind")
    common = _common(raw)
    decl: Declaration
    if kind == "namespace":
        decl = Namespace(**common)
    elif kind == "class":
        decl = Class(
            **common,
            bases=[str(b) for b in raw.get("bases") or []],
            is_incomplete=bool(raw.get("incomplete", False)),
        )
    elif kind == "enum":
        decl = Enumeration(**common)
        for item in raw.get("items") or []:
            decl.add(EnumItem(name=str(item["name"]), value=item.get("value")))
    elif kind == "method":
        decl = Method(
            **common,
            parameters=_parameters(raw),
            return_type=str(raw.get("return_type") or "void"),
            is_virtual=bool(raw.get("virtual", False)),
            is_override=bool(raw.get("override", False)),
            is_static=bool(raw.get("static", False)),
            has_body=bool(raw.get("has_body", False)),
            section=raw.get("section"),
            operator_kind=CxxOperatorKind(raw.get("operator") or "none"),
        )
    elif kind == "function":
        decl = Function(
            **common,
            parameters=_parameters(raw),
            return_type=str(raw.get("return_type") or "void"),
        )
    elif kind == "delegate":
        decl = Delegate(
            **common,
            parameters=_parameters(raw),
            return_type=str(raw.get("return_type") or "void"),
        )
    elif kind == "field":
        decl = Field(**common, type=str(raw.get("type") or ""))
    elif kind == "variable":
        decl = Variable(**common, type=str(raw.get("type") or ""))
    elif kind == "property":
        decl = Property(**common, type=str(raw.get("type") or ""))
    else:
        msg = f"{source}: unknown declaration kind '{kind}'"
        raise ConfigurationError(msg)

    if isinstance(decl, DeclarationContext) and not isinstance(decl, Enumeration):
        for child in raw.get("declarations") or []:
            decl.add(build_declaration(child, source))
    return decl


def load_declaration_tree(path: Path) -> ASTContext:
    """Load a parser dump (YAML or JSON) into an ASTContext."""
    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        msg = f"{path}: cannot parse declaration dump: {e}"
        raise ConfigurationError(msg) from e

    if not isinstance(doc, dict):
        msg = f"{path}: declaration dump must be a mapping with 'translation_units'"
        raise ConfigurationError(msg)

    lib = ASTContext()
    for raw_unit in doc.get("translation_units") or []:
        if not isinstance(raw_unit, dict):
            msg = f"{path}: malformed translation unit record: {raw_unit!r}"
            raise ConfigurationError(msg)
        unit = TranslationUnit(
            name=str(raw_unit.get("name") or ""),
            file_path=str(raw_unit.get("file_path") or INVALID_FILE_PATH),
        )
        for raw in raw_unit.get("declarations") or []:
            try:
                unit.add(build_declaration(raw, str(path)))
            except (AttributeError, KeyError, ValueError) as e:
                msg = f"{path}: malformed declaration record: {e}"
                raise ConfigurationError(msg) from e
        lib.translation_units.append(unit)
    return lib
