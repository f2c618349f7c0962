"""Logic for writing a summary report of one module-processing run."""

import json
import time
from pathlib import Path
from typing import Any

from bindprep.declaration import ASTContext, GenerationKind


class PipelineReport:
    """Collects and summarizes what the passes did to a module's tree."""

    def __init__(self, config_hash: str, module: str) -> None:
        """Initialize the report with metadata."""
        self.config_hash = config_hash
        self.module = module
        self.pass_stats: dict[str, dict[str, Any]] = {}
        self.extra: dict[str, Any] = {}
        self.start_time = time.time()

    def add_pass_stats(self, stats: dict[str, dict[str, Any]]) -> None:
        """Record per-pass statistics."""
        self.pass_stats.update(stats)

    def generate_report(self, path: str, lib: ASTContext) -> None:
        """Write the summary report to a JSON file."""
        report = {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "config_hash": self.config_hash,
                "module": self.module,
                "stage": lib.stage.name.lower(),
            },
            "passes": self.pass_stats,
            "stats": self._compute_stats(lib),
            **self.extra,
        }

        Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")

    def _compute_stats(self, lib: ASTContext) -> dict[str, Any]:
        kind_counts = {k.value: 0 for k in GenerationKind}
        documented = 0
        total = 0
        for decl in lib.iter_declarations():
            total += 1
            kind_counts[decl.generation_kind.value] += 1
            if decl.comment:
                documented += 1
        return {
            "total_declarations": total,
            "generation_kinds": kind_counts,
            "documented": documented,
        }
