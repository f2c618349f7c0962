"""Synthesis of notification handles (events) from native callback members."""

import logging

from bindprep.bare_type import bare_type
from bindprep.declaration import (
    ASTContext,
    Class,
    Event,
    Method,
    Parameter,
    PipelineStage,
)
from bindprep.documentation_corpus import signature_of
from bindprep.pipeline import DeclarationPass

logger = logging.getLogger(__name__)

EVENT_SUFFIX = "Event"
COLLISION_PREFIX = "On"


def class_bases(lib: ASTContext) -> dict[str, list[str]]:
    """Index the base classes of every class in the tree by qualified name."""
    index: dict[str, list[str]] = {}
    for decl in lib.iter_declarations():
        if isinstance(decl, Class):
            index.setdefault(decl.qualified_name, []).extend(decl.bases)
    return index


def derives_from(bases: dict[str, list[str]], class_name: str, base_name: str) -> bool:
    """Check if a class is, or transitively inherits from, another class."""
    seen: set[str] = set()
    pending = [class_name]
    while pending:
        name = pending.pop()
        if name == base_name:
            return True
        if name in seen:
            continue
        seen.add(name)
        pending.extend(bases.get(name, []))
    return False


class EventSynthesisPass(DeclarationPass):
    """Shared walk: offer every generated method of every generated class.

    An event already adapting the same method (same source, or same source
    signature on a later run) is kept as is. A name taken by another member
    falls back to ``<prefix><name>``; names still taken get a counter.
    """

    requires = PipelineStage.RENAMED
    produces = PipelineStage.EVENTS
    origin = "signal"

    def __init__(self, collision_prefix: str = COLLISION_PREFIX) -> None:
        """Initialize with the prefix used when an event name is taken."""
        super().__init__()
        self.collision_prefix = collision_prefix

    def run(self, lib: ASTContext) -> None:
        for decl in list(lib.iter_declarations()):
            if isinstance(decl, Class) and decl.is_generated:
                for method in list(decl.methods):
                    if method.is_generated and self.qualifies(lib, method):
                        self._attach(decl, method)

    def qualifies(self, lib: ASTContext, method: Method) -> bool:
        raise NotImplementedError

    def event_name(self, method: Method) -> str:
        raise NotImplementedError

    def _attach(self, cls: Class, method: Method) -> None:
        if self._find_existing(cls, method) is not None:
            self.count("existing")
            return
        event = Event(
            name=self._free_name(cls, self.event_name(method)),
            original_name=method.original_name,
            access=method.access,
            comment=method.comment,
            source=method,
            parameters=[Parameter(p.name, p.type) for p in method.parameters],
            origin=self.origin,
        )
        cls.add(event)
        self.count("synthesized")

    def _find_existing(self, cls: Class, method: Method) -> Event | None:
        signature = signature_of(method)
        for event in cls.events:
            if event.source is method:
                return event
            if (
                event.origin == self.origin
                and event.source is not None
                and signature_of(event.source) == signature
            ):
                return event
        return None

    def _free_name(self, cls: Class, name: str) -> str:
        taken = cls.find_member(name)
        if taken is not None and not isinstance(taken, Event):
            unit = cls.translation_unit
            fallback = f"{self.collision_prefix}{name}"
            logger.warning(
                "Event %s::%s clashes with a %s (%s), using %s",
                cls.qualified_name,
                name,
                taken.kind.value,
                unit.file_path if unit is not None else "?",
                fallback,
            )
            self.count("collisions")
            name = fallback
        # Overloads share a base name and are told apart by a counter.
        candidate, index = name, 2
        while cls.find_member(candidate) is not None:
            candidate = f"{name}{index}"
            index += 1
        return candidate


class GenerateSignalEventsPass(EventSynthesisPass):
    """Adds a notification handle for every signal-style method.

    A signal is declared in a signal section (``Q_SIGNALS:``) and has no body;
    it is only ever invoked through the meta-object dispatch.
    """

    name = "signal_events"
    origin = "signal"

    def __init__(
        self,
        sections: list[str],
        suffix: str = EVENT_SUFFIX,
        collision_prefix: str = COLLISION_PREFIX,
    ) -> None:
        """Initialize with the section labels that introduce signals."""
        super().__init__(collision_prefix)
        self.sections = set(sections)
        self.suffix = suffix

    def qualifies(self, lib: ASTContext, method: Method) -> bool:
        return (
            method.section in self.sections
            and not method.has_body
            and not method.is_static
            and not method.is_operator
        )

    def event_name(self, method: Method) -> str:
        return f"{method.name}{self.suffix}"


class GenerateEventEventsPass(EventSynthesisPass):
    """Adds a notification handle for every virtual event-dispatch hook.

    Hooks such as ``virtual void mousePressEvent(QMouseEvent *)`` become an
    event named after the hook without its ``Event`` suffix (``MousePress``).
    Overrides are skipped: the declaring base class carries the handle.
    """

    name = "event_events"
    origin = "event"

    def __init__(
        self, event_base: str = "QEvent", collision_prefix: str = COLLISION_PREFIX
    ) -> None:
        """Initialize with the root class of native event objects."""
        super().__init__(collision_prefix)
        self.event_base = event_base
        self.bases: dict[str, list[str]] = {}

    def run(self, lib: ASTContext) -> None:
        self.bases = class_bases(lib)
        super().run(lib)

    def qualifies(self, lib: ASTContext, method: Method) -> bool:
        if not method.is_virtual or method.is_override or method.is_static:
            return False
        if bare_type(method.return_type) != "void" or len(method.parameters) != 1:
            return False
        name = method.original_name
        if not name.endswith(EVENT_SUFFIX) or name == EVENT_SUFFIX:
            return False
        return derives_from(
            self.bases, bare_type(method.parameters[0].type), self.event_base
        )

    def event_name(self, method: Method) -> str:
        return method.name[: -len(EVENT_SUFFIX)]
