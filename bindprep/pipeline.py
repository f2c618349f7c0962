"""Ordered execution of declaration passes over one module's tree."""

import logging
from typing import Any

from bindprep.declaration import ASTContext, PipelineStage
from bindprep.errors import PipelineOrderError

logger = logging.getLogger(__name__)


class DeclarationPass:
    """Base class for a pass over the declaration tree.

    Subclasses set ``requires`` to the stage the tree must have reached and
    ``produces`` to the stage the tree is in once the pass has run, and
    implement ``run``. ``stats`` collects counters for the run report.
    """

    name = "pass"
    requires = PipelineStage.PARSED
    produces = PipelineStage.PARSED

    def __init__(self) -> None:
        """Initialize empty statistics."""
        self.stats: dict[str, Any] = {}

    def run(self, lib: ASTContext) -> None:
        raise NotImplementedError

    def count(self, key: str, amount: int = 1) -> None:
        """Increment a statistics counter."""
        self.stats[key] = self.stats.get(key, 0) + amount


class Pipeline:
    """Runs passes in order, refusing any pass whose prerequisites are unmet."""

    def __init__(self, passes: list[DeclarationPass]) -> None:
        """Initialize the pipeline with its ordered passes."""
        self.passes = passes

    def run(self, lib: ASTContext) -> ASTContext:
        """Execute every pass on the tree, advancing its stage."""
        for pass_obj in self.passes:
            if lib.stage < pass_obj.requires:
                msg = (
                    f"Pass '{pass_obj.name}' requires stage "
                    f"{pass_obj.requires.name} but the tree is at {lib.stage.name}"
                )
                raise PipelineOrderError(msg)
            logger.debug("Running pass %s", pass_obj.name)
            pass_obj.run(lib)
            lib.stage = max(lib.stage, pass_obj.produces)
            logger.info("%s: %s", pass_obj.name, pass_obj.stats or "no changes")
        return lib

    def stats(self) -> dict[str, dict[str, Any]]:
        """Collect per-pass statistics keyed by pass name."""
        return {p.name: dict(p.stats) for p in self.passes}
