"""Trigger for the native shim library exposing inline and template symbols."""

import logging
import os
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from bindprep.declaration import ASTContext, PipelineStage
from bindprep.errors import CollaboratorError
from bindprep.module_info import LINUX, MACOS, WINDOWS
from bindprep.pipeline import DeclarationPass

logger = logging.getLogger(__name__)


def inlines_library_file(inlines_library_name: str, platform: str) -> str:
    """Return the shim library file name following the platform convention."""
    prefix = "" if platform == WINDOWS else "lib"
    if platform == WINDOWS:
        extension = ".dll"
    elif platform == MACOS:
        extension = ".dylib"
    else:
        extension = ".so"
    return f"{prefix}{inlines_library_name}{extension}"


def inlines_library_path(output_dir: str, inlines_library_name: str, platform: str) -> str:
    """Return where the built shim library is expected to land."""
    file_name = inlines_library_file(inlines_library_name, platform)
    if platform == WINDOWS:
        # qmake places Windows release builds in a subdirectory.
        return os.path.join(output_dir, "release", file_name)
    return os.path.join(output_dir, file_name)


@dataclass(frozen=True)
class ShimBuildRequest:
    """Everything an external builder needs to compile the inlines shim."""

    module: str
    inlines_library_name: str
    output_dir: str
    qmake: str = "qmake"
    make: str = "make"
    platform: str = LINUX

    @property
    def project_file(self) -> str:
        return os.path.join(self.output_dir, f"{self.inlines_library_name}.pro")

    @property
    def library_path(self) -> str:
        return inlines_library_path(
            self.output_dir, self.inlines_library_name, self.platform
        )


class CompileInlinesPass(DeclarationPass):
    """Issues the shim build request; compiling is the builder's job."""

    name = "compile_inlines"
    requires = PipelineStage.RESOLVED
    produces = PipelineStage.INLINES

    def __init__(
        self,
        request: ShimBuildRequest,
        builder: Callable[[ShimBuildRequest], None] | None = None,
    ) -> None:
        """Initialize with the request and an optional builder collaborator."""
        super().__init__()
        self.request = request
        self.builder = builder
        self.issued: list[ShimBuildRequest] = []

    def run(self, lib: ASTContext) -> None:
        self.issued.append(self.request)
        self.stats["library_path"] = self.request.library_path
        if self.builder is None:
            logger.info("Shim build for %s requested, no builder wired", self.request.module)
            return
        self.builder(self.request)
        self.count("built")


def _run_tool(cmd: Sequence[str], cwd: str) -> None:
    """Run one toolchain command, raising CollaboratorError on failure."""
    print(f"Running: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        raise CollaboratorError(Path(cmd[0]).name, e.returncode) from e
    except OSError as e:
        raise CollaboratorError(Path(cmd[0]).name, 127) from e


def build_inlines(request: ShimBuildRequest) -> None:
    """Build the shim with qmake and make in the output directory."""
    _run_tool([request.qmake, request.project_file], cwd=request.output_dir)
    _run_tool([request.make], cwd=request.output_dir)
    logger.info("Built %s", request.library_path)
