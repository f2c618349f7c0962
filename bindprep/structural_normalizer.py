"""Application of module policy: value types, suppressions, enum fix-ups."""

import logging

from bindprep.bare_type import bare_type
from bindprep.declaration import (
    AccessSpecifier,
    ASTContext,
    ClassTypeKind,
    GenerationKind,
    Method,
    PipelineStage,
)
from bindprep.errors import PolicyViolationError
from bindprep.module_policy import GLOBAL_IGNORED_METHODS, ModulePolicy
from bindprep.pipeline import DeclarationPass

logger = logging.getLogger(__name__)

STAGE = "structural normalization"


class StructuralNormalizer(DeclarationPass):
    """Applies one module's policy to the tree, once per run."""

    name = "structure"
    requires = PipelineStage.CLASSIFIED
    produces = PipelineStage.NORMALIZED

    def __init__(self, policy: ModulePolicy) -> None:
        """Initialize with the policy of the module being processed."""
        super().__init__()
        self.policy = policy

    def run(self, lib: ASTContext) -> None:
        """Apply every directive of the policy."""
        self._set_value_types(lib)
        self._ignore_global_methods(lib)
        if self.policy.string_class:
            self._specialize_string(lib)
        self._name_typed_enums(lib)
        self._publish_enums(lib)
        self._ignore_operators(lib)

    def _set_value_types(self, lib: ASTContext) -> None:
        for name in self.policy.value_types:
            for cls in lib.find_classes(name):
                cls.type_kind = ClassTypeKind.VALUE
                self.count("value_types")

    def _ignore_global_methods(self, lib: ASTContext) -> None:
        for class_name, method_name in GLOBAL_IGNORED_METHODS:
            for cls in lib.find_classes(class_name):
                for method in cls.find_method(method_name):
                    method.explicitly_ignore()
                    self.count("ignored_methods")

    def _specialize_string(self, lib: ASTContext) -> None:
        policy = self.policy
        string_class = lib.find_complete_class(policy.string_class, policy.module, STAGE)
        kept = set(policy.string_kept_methods)
        for decl in string_class.children():
            if isinstance(decl, Method) and decl.original_name in kept:
                continue
            decl.explicitly_ignore()
            self.count("string_ignored")

    def _name_typed_enums(self, lib: ASTContext) -> None:
        for class_name in self.policy.typed_enum_classes:
            cls = lib.find_complete_class(class_name, self.policy.module, STAGE)
            for enum in cls.enums:
                if enum.is_anonymous:
                    enum.name = self.policy.typed_enum_name
                    self.count("named_enums")

    def _publish_enums(self, lib: ASTContext) -> None:
        for class_name, enum_name in self.policy.public_enums:
            cls = lib.find_complete_class(class_name, self.policy.module, STAGE)
            enum = cls.find_enum(enum_name)
            if enum is None:
                raise PolicyViolationError(
                    self.policy.module, f"{class_name}::{enum_name}", STAGE
                )
            enum.access = AccessSpecifier.PUBLIC
            self.count("public_enums")

    def _ignore_operators(self, lib: ASTContext) -> None:
        for removal in self.policy.ignored_operators:
            cls = lib.find_complete_class(removal.class_name, self.policy.module, STAGE)
            for op in cls.find_operators(removal.operator_kind):
                if op.parameters and bare_type(op.parameters[0].type) == removal.parameter_type:
                    op.explicitly_ignore()
                    self.count("ignored_operators")
                    break
            else:
                logger.debug(
                    "No %s operator on %s taking %s",
                    removal.operator_kind.value,
                    removal.class_name,
                    removal.parameter_type,
                )


class ResolveGenerationKinds(DeclarationPass):
    """Pushes suppression down so every declaration has its final kind."""

    name = "resolve"
    requires = PipelineStage.NORMALIZED
    produces = PipelineStage.RESOLVED

    def run(self, lib: ASTContext) -> None:
        for decl in lib.iter_declarations():
            if decl.generation_kind is not GenerationKind.IGNORE and decl.is_ignored:
                decl.generation_kind = GenerationKind.IGNORE
                self.count("propagated")
        counts: dict[str, int] = {}
        for decl in lib.iter_declarations():
            kind = decl.generation_kind.value
            counts[kind] = counts.get(kind, 0) + 1
        self.stats["generation_kinds"] = counts
