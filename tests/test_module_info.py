"""Tests for module identification and derived parser options."""

import os

import pytest

from bindprep.errors import ConfigurationError
from bindprep.load_config import load_config
from bindprep.module_info import ModuleInfo, module_from_library, module_info_from_config
from bindprep.parser_options import build_parser_options


@pytest.mark.parametrize(
    ("library", "module"),
    [
        ("Qt5Core", "Core"),
        ("Qt5Widgetsd", "Widgets"),
        ("QtSvg", "Svg"),
        ("Qt5Gui.dll", "Gui"),
        ("QtQml", "Qml"),
    ],
)
def test_module_from_library(library: str, module: str) -> None:
    """Verify the module identifier is taken from the library file name."""
    assert module_from_library(library) == module


def test_module_from_unrelated_library_is_an_error() -> None:
    """Verify that a library name without a Qt module is rejected."""
    with pytest.raises(ConfigurationError):
        module_from_library("libfoo")


def test_include_root_on_linux() -> None:
    """Verify that the include root is the module's include subdirectory."""
    info = ModuleInfo(
        library="Qt5Widgets",
        include_path="/opt/qt/include",
        library_path="/opt/qt/lib",
        platform="linux",
    )
    assert info.module == "Widgets"
    assert info.qt_module == "QtWidgets"
    assert info.include_root() == os.path.join("/opt/qt/include", "QtWidgets")


def test_include_root_on_macos_uses_framework_headers() -> None:
    """Verify that macOS headers live inside the library framework."""
    info = ModuleInfo(
        library="QtWidgets",
        include_path="/opt/qt/include",
        library_path="/opt/qt/lib",
        platform="macos",
    )
    assert info.include_root() == os.path.join(
        "/opt/qt/lib", "QtWidgets.framework", "Headers"
    )


def test_module_info_from_config() -> None:
    """Verify that ModuleInfo is filled from the merged configuration."""
    config = load_config(None)
    config["module"].update(
        library="Qt5Core", include_path="/qt/include", qmake="/qt/bin/qmake"
    )

    info = module_info_from_config(config)

    assert info.module == "Core"
    assert info.qmake == "/qt/bin/qmake"
    assert info.make == "make"


def test_module_info_requires_library() -> None:
    """Verify that a configuration without a library is rejected."""
    with pytest.raises(ConfigurationError, match="module.library"):
        module_info_from_config(load_config(None))


def test_parser_options_for_core() -> None:
    """Verify library naming, hand-written sources and patched virtuals."""
    info = ModuleInfo(
        library="Qt5Core",
        include_path="/opt/qt/include",
        library_path="/opt/qt/lib",
        platform="linux",
    )

    options = build_parser_options(info, "/src/QtSharp")

    assert options.library_name == "QtCoreSharp"
    assert options.inlines_library_name == "QtCoreSharp-inlines"
    assert options.binding_library_file == "QtCoreSharp.dll"
    assert options.headers == ["QtCore"]
    assert options.libraries == ["Qt5Core"]
    assert options.include_dirs[0] == "/opt/qt/include"
    assert options.code_files[0] == os.path.join("/src/QtSharp", "QObject.cs")
    assert options.patched_virtual_functions == ["qt_metacall"]


def test_parser_options_on_macos_add_frameworks() -> None:
    """Verify framework search arguments on macOS."""
    info = ModuleInfo(
        library="QtGui",
        include_path="/qt/include",
        library_path="/qt/lib",
        framework_dirs=["/System/Library/Frameworks"],
        platform="macos",
    )

    options = build_parser_options(info)

    assert options.arguments == ["-F/System/Library/Frameworks", "-F/qt/lib"]
    assert options.include_dirs[0] == os.path.join(
        "/qt/lib", "QtGui.framework", "Headers"
    )
    assert options.to_dict()["library_dirs"][-1] == "/qt/lib"
