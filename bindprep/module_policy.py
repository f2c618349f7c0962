"""Per-module special-case rules, declared as data and validated eagerly."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from bindprep.declaration import ASTContext, CxxOperatorKind
from bindprep.errors import PolicyViolationError

# Copied by value in the binding wherever they are defined.
VALUE_TYPES = [
    "QByteArray",
    "QListData",
    "QListData::Data",
    "QLocale",
    "QModelIndex",
    "QPoint",
    "QPointF",
    "QSize",
    "QSizeF",
    "QRect",
    "QRectF",
    "QGenericArgument",
    "QGenericReturnArgument",
    "QVariant",
]

# (class, method) pairs suppressed in every module that defines the class.
GLOBAL_IGNORED_METHODS = [
    ("QString", "fromStdWString"),
    ("QString", "toStdWString"),
]

TYPED_ENUM_NAME = "TypeEnum"


@dataclass(frozen=True)
class OperatorRemoval:
    """A conversion operator to drop, picked by its first parameter type."""

    class_name: str
    operator_kind: CxxOperatorKind
    parameter_type: str


@dataclass(frozen=True)
class ModulePolicy:
    """Directives applied by the structural normalizer for one module."""

    module: str = ""
    string_class: str | None = None
    string_kept_methods: tuple[str, ...] = ()
    typed_enum_classes: tuple[str, ...] = ()
    typed_enum_name: str = TYPED_ENUM_NAME
    # (class, enum) pairs forced to public access
    public_enums: tuple[tuple[str, str], ...] = ()
    ignored_operators: tuple[OperatorRemoval, ...] = ()
    value_types: tuple[str, ...] = field(default=tuple(VALUE_TYPES))


MODULE_POLICIES: dict[str, ModulePolicy] = {
    "Core": ModulePolicy(
        module="Core",
        # QString maps onto the target's string type; only the two
        # UTF-16 boundary conversions are bound.
        string_class="QString",
        string_kept_methods=("utf16", "fromUtf16"),
        ignored_operators=(
            OperatorRemoval("QChar", CxxOperatorKind.EXPLICIT_CONVERSION, "char"),
            OperatorRemoval("QChar", CxxOperatorKind.CONVERSION, "int"),
        ),
    ),
    "Widgets": ModulePolicy(
        module="Widgets",
        typed_enum_classes=(
            "QGraphicsEllipseItem",
            "QGraphicsItemGroup",
            "QGraphicsLineItem",
            "QGraphicsPathItem",
            "QGraphicsPixmapItem",
            "QGraphicsPolygonItem",
            "QGraphicsProxyWidget",
            "QGraphicsRectItem",
            "QGraphicsSimpleTextItem",
            "QGraphicsTextItem",
            "QGraphicsWidget",
        ),
        public_enums=(
            ("QGraphicsItem", "Extension"),
            ("QAbstractSlider", "SliderChange"),
            ("QAbstractItemView", "CursorAction"),
            ("QAbstractItemView", "State"),
            ("QAbstractItemView", "DropIndicatorPosition"),
        ),
    ),
    "Svg": ModulePolicy(
        module="Svg",
        typed_enum_classes=("QGraphicsSvgItem",),
    ),
}


def policy_for(module: str, extra_value_types: list[str] | None = None) -> ModulePolicy:
    """Return the policy for a module, falling back to the module-independent rules."""
    policy = MODULE_POLICIES.get(module, ModulePolicy(module=module))
    if extra_value_types:
        merged = tuple(dict.fromkeys([*policy.value_types, *extra_value_types]))
        policy = replace(policy, value_types=merged)
    return policy


def validate_policy(policy: ModulePolicy, lib: ASTContext) -> None:
    """Check every name the policy references against the parsed tree.

    Value types are name-driven and optional, so they are not checked. Anything
    else that is missing means the policy and the parsed library version have
    drifted apart and raises PolicyViolationError.
    """
    stage = "policy validation"
    if policy.string_class:
        string_class = lib.find_complete_class(policy.string_class, policy.module, stage)
        for method_name in policy.string_kept_methods:
            if not string_class.find_method(method_name):
                raise PolicyViolationError(
                    policy.module, f"{policy.string_class}::{method_name}", stage
                )
    for class_name in policy.typed_enum_classes:
        lib.find_complete_class(class_name, policy.module, stage)
    for class_name, enum_name in policy.public_enums:
        cls = lib.find_complete_class(class_name, policy.module, stage)
        if cls.find_enum(enum_name) is None:
            raise PolicyViolationError(
                policy.module, f"{class_name}::{enum_name}", stage
            )
    for removal in policy.ignored_operators:
        lib.find_complete_class(removal.class_name, policy.module, stage)
