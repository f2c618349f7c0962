"""Options handed to the external parser and binding driver for one module."""

import os
from dataclasses import asdict, dataclass, field
from typing import Any

from bindprep.module_info import MACOS, ModuleInfo

# Hand-written binding sources shipped alongside specific modules.
MODULE_CODE_FILES: dict[str, list[str]] = {
    "Core": ["QObject.cs", "QChar.cs", "_iobuf.cs"],
    "Gui": ["IQAccessibleActionInterface.cs"],
    "Qml": ["IQQmlParserStatus.cs"],
}

PATCHED_VIRTUAL_FUNCTIONS = ["qt_metacall"]


@dataclass
class ParserOptions:
    """Parser and driver settings derived from the module configuration."""

    library_name: str
    output_namespace: str
    target_triple: str
    headers: list[str] = field(default_factory=list)
    system_include_dirs: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    library_dirs: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    arguments: list[str] = field(default_factory=list)
    code_files: list[str] = field(default_factory=list)
    patched_virtual_functions: list[str] = field(default_factory=list)

    @property
    def inlines_library_name(self) -> str:
        return f"{self.library_name}-inlines"

    @property
    def binding_library_file(self) -> str:
        return f"{self.library_name}.dll"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_parser_options(info: ModuleInfo, code_files_dir: str = "") -> ParserOptions:
    """Derive parser options for a module, including macOS framework layout."""
    options = ParserOptions(
        library_name=f"{info.qt_module}Sharp",
        output_namespace=info.qt_module,
        target_triple=info.target,
        headers=[info.qt_module],
        system_include_dirs=list(info.system_include_dirs),
        patched_virtual_functions=list(PATCHED_VIRTUAL_FUNCTIONS),
    )

    if info.platform == MACOS:
        options.arguments.extend(f"-F{d}" for d in info.framework_dirs)
        options.arguments.append(f"-F{info.library_path}")
        framework = os.path.join(info.library_path, f"{info.library}.framework")
        options.library_dirs.append(framework)
        options.include_dirs.append(os.path.join(framework, "Headers"))

    options.include_dirs.append(info.include_path)
    module_include = os.path.join(info.include_path, info.qt_module)
    if os.path.isdir(module_include):
        options.include_dirs.append(module_include)

    options.library_dirs.append(info.library_path)
    options.libraries.append(info.library)
    options.code_files = [
        os.path.join(code_files_dir, f) for f in MODULE_CODE_FILES.get(info.module, [])
    ]
    return options
