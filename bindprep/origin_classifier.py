"""Classification of declarations by the header directory they come from."""

import logging
from pathlib import Path

from bindprep.declaration import (
    ASTContext,
    Declaration,
    GenerationKind,
    PipelineStage,
)
from bindprep.pipeline import DeclarationPass
from bindprep.visibility_pruner import VisibilityPruner

logger = logging.getLogger(__name__)


def link_declaration(decl: Declaration) -> int:
    """Tag a declaration and everything nested in it as linked.

    Returns the number of declarations tagged.
    """
    decl.generation_kind = GenerationKind.LINK
    tagged = 1
    for child in decl.children():
        tagged += link_declaration(child)
    return tagged


class OriginClassifier(DeclarationPass):
    """Links units from other modules and prunes private names in our own.

    Units whose header directory is not exactly the module's include root were
    bound by a previously generated module and are linked. Units without a
    resolvable file are skipped.
    """

    name = "origin"
    requires = PipelineStage.PARSED
    produces = PipelineStage.CLASSIFIED

    def __init__(self, include_root: str, pruner: VisibilityPruner) -> None:
        """Initialize with the module's own include directory."""
        super().__init__()
        self.include_root = Path(include_root)
        self.pruner = pruner

    def run(self, lib: ASTContext) -> None:
        """Classify every translation unit of the tree."""
        for unit in lib.translation_units:
            if not unit.is_valid:
                self.count("skipped_units")
                continue
            if Path(unit.file_path).parent != self.include_root:
                self.count("linked", link_declaration(unit))
                self.count("linked_units")
            else:
                self.count("native_units")
                before = self.pruner.ignored
                self.pruner.prune(unit)
                self.count("private_ignored", self.pruner.ignored - before)
        logger.debug(
            "Classified %d units against include root %s",
            len(lib.translation_units),
            self.include_root,
        )
