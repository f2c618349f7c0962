"""Data model for the parsed declaration tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from bindprep.errors import PolicyViolationError

INVALID_FILE_PATH = "<invalid>"


class GenerationKind(Enum):
    """Whether binding text is emitted for a declaration."""

    GENERATE = "generate"
    LINK = "link"
    IGNORE = "ignore"


class AccessSpecifier(Enum):
    """C++ access specifier."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class DeclarationKind(Enum):
    """Kind tag of a declaration node."""

    TRANSLATION_UNIT = "translation_unit"
    NAMESPACE = "namespace"
    CLASS = "class"
    METHOD = "method"
    FUNCTION = "function"
    FIELD = "field"
    VARIABLE = "variable"
    PROPERTY = "property"
    ENUM = "enum"
    ENUM_ITEM = "enum_item"
    PARAMETER = "parameter"
    DELEGATE = "delegate"
    EVENT = "event"


class CxxOperatorKind(Enum):
    """Operator tag of a method; only conversions are told apart."""

    NONE = "none"
    CONVERSION = "conversion"
    EXPLICIT_CONVERSION = "explicit_conversion"
    OTHER = "other"


class ClassTypeKind(Enum):
    """How a class is represented in the emitted binding."""

    REFERENCE = "reference"
    VALUE = "value"


class PipelineStage(IntEnum):
    """Ordered stages a declaration tree moves through."""

    PARSED = 0
    CLASSIFIED = 1
    NORMALIZED = 2
    RESOLVED = 3
    COMMENTED = 4
    RENAMED = 5
    EVENTS = 6
    INLINES = 7


@dataclass(eq=False)
class Declaration:
    """A named node of the parsed tree."""

    name: str
    original_name: str = ""
    access: AccessSpecifier = AccessSpecifier.PUBLIC
    generation_kind: GenerationKind = GenerationKind.GENERATE
    explicitly_ignored: bool = False
    comment: str | None = None
    # Non-owning back-reference to the owning context.
    namespace: DeclarationContext | None = field(default=None, repr=False)

    kind = DeclarationKind.VARIABLE

    def __post_init__(self) -> None:
        """Default the original name to the parsed name."""
        if not self.original_name:
            self.original_name = self.name

    def children(self) -> Iterator[Declaration]:
        """Yield owned declarations; leaves own none."""
        return iter(())

    def explicitly_ignore(self) -> None:
        """Suppress this declaration on purpose."""
        self.explicitly_ignored = True
        self.generation_kind = GenerationKind.IGNORE

    @property
    def is_ignored(self) -> bool:
        """True when this declaration or any enclosing context is suppressed."""
        decl: Declaration | None = self
        while decl is not None:
            if decl.explicitly_ignored or decl.generation_kind is GenerationKind.IGNORE:
                return True
            decl = decl.namespace
        return False

    @property
    def is_generated(self) -> bool:
        """True when fresh binding text will be emitted for this declaration."""
        return self.generation_kind is GenerationKind.GENERATE and not self.is_ignored

    @property
    def qualified_name(self) -> str:
        return "::".join(d.name for d in self._scope_chain())

    @property
    def qualified_original_name(self) -> str:
        return "::".join(d.original_name for d in self._scope_chain())

    @property
    def translation_unit(self) -> TranslationUnit | None:
        """Return the unit this declaration was parsed from."""
        decl: Declaration | None = self
        while decl is not None and not isinstance(decl, TranslationUnit):
            decl = decl.namespace
        return decl

    def _scope_chain(self) -> list[Declaration]:
        chain: list[Declaration] = []
        decl: Declaration | None = self
        while decl is not None and not isinstance(decl, TranslationUnit):
            chain.append(decl)
            decl = decl.namespace
        chain.reverse()
        return chain


@dataclass(eq=False)
class DeclarationContext(Declaration):
    """A declaration owning child declarations."""

    declarations: list[Declaration] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Adopt children passed to the constructor."""
        super().__post_init__()
        for decl in self.declarations:
            decl.namespace = self

    def add(self, decl: Declaration) -> Declaration:
        """Take ownership of a child declaration."""
        decl.namespace = self
        self.declarations.append(decl)
        return decl

    def children(self) -> Iterator[Declaration]:
        """Yield owned declarations in declaration order."""
        return iter(list(self.declarations))

    @property
    def classes(self) -> list[Class]:
        return [d for d in self.declarations if isinstance(d, Class)]

    @property
    def enums(self) -> list[Enumeration]:
        return [d for d in self.declarations if isinstance(d, Enumeration)]

    def find_class(self, name: str) -> Class | None:
        """Find a directly nested class by name."""
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None

    def find_enum(self, name: str) -> Enumeration | None:
        """Find a directly nested enumeration by name."""
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None


@dataclass(eq=False)
class Namespace(DeclarationContext):
    kind = DeclarationKind.NAMESPACE


@dataclass(eq=False)
class TranslationUnit(DeclarationContext):
    """Declarations parsed from one header file."""

    name: str = ""
    file_path: str = INVALID_FILE_PATH

    kind = DeclarationKind.TRANSLATION_UNIT

    @property
    def is_valid(self) -> bool:
        """Check if the unit resolved to a real file."""
        return bool(self.file_path) and self.file_path != INVALID_FILE_PATH


@dataclass(eq=False)
class Parameter:
    """A function or method parameter."""

    name: str
    type: str

    kind = DeclarationKind.PARAMETER


@dataclass(eq=False)
class Function(Declaration):
    """A free function."""

    parameters: list[Parameter] = field(default_factory=list)
    return_type: str = "void"

    kind = DeclarationKind.FUNCTION


@dataclass(eq=False)
class Method(Function):
    """A class member function, including operators."""

    is_virtual: bool = False
    is_override: bool = False
    is_static: bool = False
    has_body: bool = False
    # Access-section label as written in the header, e.g. "Q_SIGNALS".
    section: str | None = None
    operator_kind: CxxOperatorKind = CxxOperatorKind.NONE

    kind = DeclarationKind.METHOD

    @property
    def is_operator(self) -> bool:
        return self.operator_kind is not CxxOperatorKind.NONE


@dataclass(eq=False)
class Delegate(Function):
    kind = DeclarationKind.DELEGATE


@dataclass(eq=False)
class Field(Declaration):
    type: str = ""

    kind = DeclarationKind.FIELD


@dataclass(eq=False)
class Variable(Declaration):
    type: str = ""

    kind = DeclarationKind.VARIABLE


@dataclass(eq=False)
class Property(Declaration):
    type: str = ""

    kind = DeclarationKind.PROPERTY


@dataclass(eq=False)
class Event(Declaration):
    """A synthesized notification handle adapting a native callback."""

    source: Method | None = field(default=None, repr=False)
    parameters: list[Parameter] = field(default_factory=list)
    origin: str = "signal"  # "signal" or "event"

    kind = DeclarationKind.EVENT


@dataclass(eq=False)
class EnumItem(Declaration):
    value: int | None = None

    kind = DeclarationKind.ENUM_ITEM


@dataclass(eq=False)
class Enumeration(DeclarationContext):
    """An enum; an empty name marks an anonymous one."""

    kind = DeclarationKind.ENUM

    @property
    def items(self) -> list[EnumItem]:
        return [d for d in self.declarations if isinstance(d, EnumItem)]

    @property
    def is_anonymous(self) -> bool:
        return not self.name


@dataclass(eq=False)
class Class(DeclarationContext):
    """A class or struct with its members."""

    type_kind: ClassTypeKind = ClassTypeKind.REFERENCE
    bases: list[str] = field(default_factory=list)
    is_incomplete: bool = False
    methods: list[Method] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    kind = DeclarationKind.CLASS

    def __post_init__(self) -> None:
        """Adopt members passed to the constructor."""
        super().__post_init__()
        for member in self._members():
            member.namespace = self

    def add(self, decl: Declaration) -> Declaration:
        """Take ownership of a member, routing it into the matching list."""
        decl.namespace = self
        if isinstance(decl, Method):
            self.methods.append(decl)
        elif isinstance(decl, Field):
            self.fields.append(decl)
        elif isinstance(decl, Property):
            self.properties.append(decl)
        elif isinstance(decl, Event):
            self.events.append(decl)
        else:
            self.declarations.append(decl)
        return decl

    def children(self) -> Iterator[Declaration]:
        """Yield nested declarations followed by members."""
        return iter([*self.declarations, *self._members()])

    @property
    def is_value_type(self) -> bool:
        return self.type_kind is ClassTypeKind.VALUE

    def find_method(self, original_name: str) -> list[Method]:
        """Return the overloads declared with the given source name."""
        return [m for m in self.methods if m.original_name == original_name]

    def find_operators(self, operator_kind: CxxOperatorKind) -> list[Method]:
        """Return the operators of the given kind."""
        return [m for m in self.methods if m.operator_kind is operator_kind]

    def find_member(self, name: str) -> Declaration | None:
        """Return any member or nested declaration with the target-facing name."""
        for decl in self.children():
            if decl.name == name:
                return decl
        return None

    def _members(self) -> list[Declaration]:
        return [*self.methods, *self.fields, *self.properties, *self.events]


def iter_declarations(root: Declaration) -> Iterator[Declaration]:
    """Iterate over a declaration and all its descendants, pre-order."""
    yield root
    for child in root.children():
        yield from iter_declarations(child)


@dataclass(eq=False)
class ASTContext:
    """Root of the tree: every parsed translation unit of one module run."""

    translation_units: list[TranslationUnit] = field(default_factory=list)
    stage: PipelineStage = PipelineStage.PARSED

    def iter_declarations(self) -> Iterator[Declaration]:
        """Iterate over every declaration of every unit."""
        for unit in self.translation_units:
            yield from iter_declarations(unit)

    def find_classes(self, qualified_name: str) -> list[Class]:
        """Return every class with the given qualified name, in unit order."""
        return [
            d
            for d in self.iter_declarations()
            if isinstance(d, Class) and d.qualified_name == qualified_name
        ]

    def find_complete_class(
        self, qualified_name: str, module: str = "", stage: str = "lookup"
    ) -> Class:
        """Return the defining (non forward-declared) class or fail loudly."""
        for cls in self.find_classes(qualified_name):
            if not cls.is_incomplete:
                return cls
        raise PolicyViolationError(module, qualified_name, stage)
