"""Identifier casing normalization for renameable declarations."""

from enum import Flag, auto

from bindprep.declaration import (
    ASTContext,
    Declaration,
    Delegate,
    Event,
    Field,
    Function,
    Method,
    PipelineStage,
    Property,
    Variable,
)
from bindprep.errors import ConfigurationError
from bindprep.pipeline import DeclarationPass


class RenameTargets(Flag):
    """Declaration kinds the rename pass may touch."""

    NONE = 0
    FUNCTION = auto()
    METHOD = auto()
    PROPERTY = auto()
    DELEGATE = auto()
    FIELD = auto()
    VARIABLE = auto()
    EVENT = auto()


def rename_targets_from_names(names: list[str]) -> RenameTargets:
    """Build a RenameTargets flag from config names like "method"."""
    targets = RenameTargets.NONE
    for name in names:
        try:
            targets |= RenameTargets[str(name).upper()]
        except KeyError:
            msg = f"Unknown rename target '{name}' in 'rename.targets'"
            raise ConfigurationError(msg) from None
    return targets


def to_upper_camel_case(name: str) -> str:
    """Upper-case the first letter; applying it twice changes nothing."""
    if not name or not name[0].isalpha():
        return name
    return name[0].upper() + name[1:]


def to_lower_camel_case(name: str) -> str:
    if not name or not name[0].isalpha():
        return name
    return name[0].lower() + name[1:]


CASE_PATTERNS = {
    "upper_camel_case": to_upper_camel_case,
    "lower_camel_case": to_lower_camel_case,
}


def target_of(decl: Declaration) -> RenameTargets:
    """Map a declaration onto its rename target flag."""
    # Method and Delegate before their Function base.
    if isinstance(decl, Method):
        return RenameTargets.METHOD
    if isinstance(decl, Delegate):
        return RenameTargets.DELEGATE
    if isinstance(decl, Function):
        return RenameTargets.FUNCTION
    if isinstance(decl, Event):
        return RenameTargets.EVENT
    if isinstance(decl, Property):
        return RenameTargets.PROPERTY
    if isinstance(decl, Field):
        return RenameTargets.FIELD
    if isinstance(decl, Variable):
        return RenameTargets.VARIABLE
    return RenameTargets.NONE


class CaseRenamePass(DeclarationPass):
    """Rewrites target-facing names to one casing convention.

    Only generated declarations are renamed; ``original_name`` keeps the
    source name for documentation lookup and native symbol binding.
    """

    name = "rename"
    requires = PipelineStage.COMMENTED
    produces = PipelineStage.RENAMED

    def __init__(self, targets: RenameTargets, pattern: str = "upper_camel_case") -> None:
        """Initialize with the kinds to rename and the casing pattern."""
        super().__init__()
        self.targets = targets
        if pattern not in CASE_PATTERNS:
            msg = f"Unknown rename pattern '{pattern}'"
            raise ConfigurationError(msg)
        self.convert = CASE_PATTERNS[pattern]

    def run(self, lib: ASTContext) -> None:
        for decl in lib.iter_declarations():
            if not self.is_renameable(decl):
                continue
            new_name = self.convert(decl.name)
            if new_name != decl.name:
                decl.name = new_name
                self.count("renamed")

    def is_renameable(self, decl: Declaration) -> bool:
        """Check if a declaration is of a targeted kind and will be generated."""
        target = target_of(decl)
        if target is RenameTargets.NONE or not target & self.targets:
            return False
        if isinstance(decl, Method) and decl.is_operator:
            return False
        return decl.is_generated
