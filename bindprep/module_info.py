"""Module configuration: which Qt library a run processes and where it lives."""

import os
import re
import sys
from dataclasses import dataclass, field
from typing import Any

from bindprep.errors import ConfigurationError

MODULE_NAME_RE = re.compile(r"Qt\d?(?P<module>\w+?)d?(\.\w+)?$")

WINDOWS = "windows"
MACOS = "macos"
LINUX = "linux"


def current_platform() -> str:
    """Map sys.platform onto the three platform families we distinguish."""
    if sys.platform.startswith("win"):
        return WINDOWS
    if sys.platform == "darwin":
        return MACOS
    return LINUX


def module_from_library(library: str) -> str:
    """Extract the module identifier from a library file name.

    "Qt5Core" -> "Core", "Qt5Widgetsd" -> "Widgets", "QtSvg.dll" -> "Svg".
    """
    match = MODULE_NAME_RE.search(library)
    if not match or not match.group("module"):
        msg = f"Cannot derive a Qt module name from library '{library}'"
        raise ConfigurationError(msg)
    return match.group("module")


def _native_path(path: str) -> str:
    return path.replace("/", os.sep)


@dataclass
class ModuleInfo:
    """Everything the pipeline needs to know about the module being processed."""

    library: str
    include_path: str
    library_path: str
    target: str = ""
    system_include_dirs: list[str] = field(default_factory=list)
    framework_dirs: list[str] = field(default_factory=list)
    docs: str = ""
    qmake: str = "qmake"
    make: str = "make"
    platform: str = field(default_factory=current_platform)
    module: str = field(init=False)

    def __post_init__(self) -> None:
        """Normalize paths and compute the module identifier once."""
        self.include_path = _native_path(self.include_path)
        self.library_path = _native_path(self.library_path)
        self.module = module_from_library(self.library)

    @property
    def qt_module(self) -> str:
        return f"Qt{self.module}"

    def include_root(self) -> str:
        """Return the directory holding this module's own headers."""
        if self.platform == MACOS:
            framework = f"{self.library}.framework"
            return os.path.join(self.library_path, framework, "Headers")
        return os.path.join(self.include_path, self.qt_module)


def module_info_from_config(config: dict[str, Any]) -> ModuleInfo:
    """Build ModuleInfo from the 'module' section of the merged config."""
    section = config.get("module", {})
    if not section.get("library"):
        msg = "Configuration is missing 'module.library'"
        raise ConfigurationError(msg)
    return ModuleInfo(
        library=section["library"],
        include_path=section.get("include_path") or "",
        library_path=section.get("library_path") or "",
        target=section.get("target") or "",
        system_include_dirs=list(section.get("system_include_dirs") or []),
        framework_dirs=list(section.get("framework_dirs") or []),
        docs=section.get("docs") or "",
        qmake=section.get("qmake") or "qmake",
        make=section.get("make") or "make",
        platform=section.get("platform") or current_platform(),
    )
