"""Tests for notification handle synthesis."""

import logging

import pytest

from bindprep.declaration import (
    ASTContext,
    Class,
    Event,
    Field,
    GenerationKind,
    Method,
    Parameter,
    PipelineStage,
    TranslationUnit,
)
from bindprep.event_synthesis import (
    GenerateEventEventsPass,
    GenerateSignalEventsPass,
    class_bases,
    derives_from,
)

SIGNAL_SECTIONS = ["Q_SIGNALS", "signals"]


def _lib(*classes: Class) -> ASTContext:
    unit = TranslationUnit(file_path="/qt/QtWidgets/qwidget.h")
    unit.add(Class(name="QEvent"))
    unit.add(Class(name="QInputEvent", bases=["QEvent"]))
    unit.add(Class(name="QMouseEvent", bases=["QInputEvent"]))
    for cls in classes:
        unit.add(cls)
    return ASTContext(translation_units=[unit], stage=PipelineStage.RENAMED)


def _signal(name: str, original: str) -> Method:
    return Method(
        name=name,
        original_name=original,
        section="Q_SIGNALS",
        parameters=[Parameter("checked", "bool")],
    )


def _hook(name: str, original: str, **kwargs: bool) -> Method:
    return Method(
        name=name,
        original_name=original,
        is_virtual=True,
        parameters=[Parameter("event", "QMouseEvent *")],
        **kwargs,
    )


def test_derives_from_follows_base_chain() -> None:
    """Verify transitive base lookup."""
    bases = class_bases(_lib())
    assert bases["QMouseEvent"] == ["QInputEvent"]
    assert derives_from(bases, "QMouseEvent", "QEvent")
    assert derives_from(bases, "QEvent", "QEvent")
    assert not derives_from(bases, "QEvent", "QMouseEvent")
    assert not derives_from(bases, "QUnknown", "QEvent")


def test_signal_gets_event() -> None:
    """Verify that a signal gains an event carrying its parameters."""
    button = Class(name="QAbstractButton")
    clicked = button.add(_signal("Clicked", "clicked"))

    signals = GenerateSignalEventsPass(SIGNAL_SECTIONS)
    signals.run(_lib(button))

    (event,) = button.events
    assert event.name == "ClickedEvent"
    assert event.source is clicked
    assert event.origin == "signal"
    assert [p.type for p in event.parameters] == ["bool"]
    assert event.namespace is button
    assert signals.stats["synthesized"] == 1


def test_non_signals_are_not_events() -> None:
    """Verify that slots, static and defined methods are left alone."""
    button = Class(name="QAbstractButton")
    button.add(Method(name="Click", section="public Q_SLOTS"))
    button.add(Method(name="Notify", section="Q_SIGNALS", has_body=True))
    button.add(Method(name="Tr", section="Q_SIGNALS", is_static=True))

    GenerateSignalEventsPass(SIGNAL_SECTIONS).run(_lib(button))

    assert button.events == []


def test_event_synthesis_is_idempotent() -> None:
    """Verify that a second run adds no duplicate events."""
    button = Class(name="QAbstractButton")
    button.add(_signal("Clicked", "clicked"))
    lib = _lib(button)

    GenerateSignalEventsPass(SIGNAL_SECTIONS).run(lib)
    second = GenerateSignalEventsPass(SIGNAL_SECTIONS)
    second.run(lib)

    assert [e.name for e in button.events] == ["ClickedEvent"]
    assert second.stats == {"existing": 1}


def test_name_collision_falls_back_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    """Verify that a member holding the event name moves the event to a prefixed name."""
    button = Class(name="QAbstractButton")
    button.add(_signal("Clicked", "clicked"))
    button.add(Field(name="ClickedEvent"))

    signals = GenerateSignalEventsPass(SIGNAL_SECTIONS)
    with caplog.at_level(logging.WARNING):
        signals.run(_lib(button))

    assert [e.name for e in button.events] == ["OnClickedEvent"]
    assert signals.stats == {"collisions": 1, "synthesized": 1}
    assert "QAbstractButton::ClickedEvent" in caplog.text
    assert "/qt/QtWidgets/qwidget.h" in caplog.text


def test_overloaded_signals_each_get_an_event() -> None:
    """Verify that overloads get distinct events that survive a second run."""
    combo = Class(name="QComboBox")
    by_index = combo.add(
        Method(
            name="Activated",
            original_name="activated",
            section="Q_SIGNALS",
            parameters=[Parameter("index", "int")],
        )
    )
    by_text = combo.add(
        Method(
            name="Activated",
            original_name="activated",
            section="Q_SIGNALS",
            parameters=[Parameter("text", "const QString &")],
        )
    )
    lib = _lib(combo)

    GenerateSignalEventsPass(SIGNAL_SECTIONS).run(lib)
    second = GenerateSignalEventsPass(SIGNAL_SECTIONS)
    second.run(lib)

    events = [(e.name, e.source, [p.type for p in e.parameters]) for e in combo.events]
    assert events == [
        ("ActivatedEvent", by_index, ["int"]),
        ("ActivatedEvent2", by_text, ["const QString &"]),
    ]
    assert second.stats == {"existing": 2}


def test_signals_of_linked_classes_are_skipped() -> None:
    """Verify that only generated classes gain events."""
    button = Class(name="QAbstractButton", generation_kind=GenerationKind.LINK)
    button.add(_signal("Clicked", "clicked"))

    GenerateSignalEventsPass(SIGNAL_SECTIONS).run(_lib(button))

    assert button.events == []


def test_virtual_hook_gets_event() -> None:
    """Verify that an event-dispatch hook gains an event named after it."""
    widget = Class(name="QWidget")
    hook = widget.add(_hook("MousePressEvent", "mousePressEvent"))

    hooks = GenerateEventEventsPass()
    hooks.run(_lib(widget))

    (event,) = widget.events
    assert event.name == "MousePress"
    assert event.source is hook
    assert event.origin == "event"


def test_hook_overrides_and_non_event_parameters_are_skipped() -> None:
    """Verify overrides and hooks taking non-event types are not events."""
    widget = Class(name="QPushButton", bases=["QWidget"])
    widget.add(_hook("MousePressEvent", "mousePressEvent", is_override=True))
    widget.add(
        Method(
            name="ResizeEvent",
            original_name="resizeEvent",
            is_virtual=True,
            parameters=[Parameter("size", "QSize")],
        )
    )
    widget.add(
        Method(
            name="Event",
            original_name="event",
            is_virtual=True,
            return_type="bool",
            parameters=[Parameter("e", "QEvent *")],
        )
    )

    GenerateEventEventsPass().run(_lib(widget))

    assert widget.events == []


def test_hooks_sharing_a_name_with_slots_get_events() -> None:
    """Verify that close and resize hooks coexist with the Close and Resize methods."""
    widget = Class(name="QWidget")
    widget.add(Method(name="Close", original_name="close", return_type="bool"))
    widget.add(
        Method(
            name="Resize",
            original_name="resize",
            parameters=[Parameter("w", "int"), Parameter("h", "int")],
        )
    )
    for hook, event_type in (("closeEvent", "QCloseEvent"), ("resizeEvent", "QResizeEvent")):
        widget.add(
            Method(
                name=hook[0].upper() + hook[1:],
                original_name=hook,
                is_virtual=True,
                parameters=[Parameter("event", f"{event_type} *")],
            )
        )
    lib = _lib(widget)
    lib.translation_units[0].add(Class(name="QCloseEvent", bases=["QEvent"]))
    lib.translation_units[0].add(Class(name="QResizeEvent", bases=["QEvent"]))

    hooks = GenerateEventEventsPass()
    hooks.run(lib)

    assert [e.name for e in widget.events] == ["OnClose", "OnResize"]
    assert [e.source.original_name for e in widget.events] == ["closeEvent", "resizeEvent"]
    assert hooks.stats == {"collisions": 2, "synthesized": 2}


def test_existing_event_for_the_same_hook_is_reused() -> None:
    """Verify that an event adapting the same hook signature counts as existing."""
    widget = Class(name="QWidget")
    widget.add(_hook("MousePressEvent", "mousePressEvent"))
    earlier = _hook("MousePressEvent", "mousePressEvent")
    widget.add(Event(name="MousePress", source=earlier, origin="event"))

    hooks = GenerateEventEventsPass()
    hooks.run(_lib(widget))

    assert len(widget.events) == 1
    assert hooks.stats == {"existing": 1}


def test_event_without_the_same_source_does_not_block() -> None:
    """Verify that an unrelated event with the same name only shifts the new name."""
    widget = Class(name="QWidget")
    widget.add(_hook("MousePressEvent", "mousePressEvent"))
    widget.add(Event(name="MousePress"))

    hooks = GenerateEventEventsPass()
    hooks.run(_lib(widget))

    assert [e.name for e in widget.events] == ["MousePress", "MousePress2"]
    assert hooks.stats == {"synthesized": 1}
