"""Orchestration logic for classifying and enriching one module's declarations."""

import argparse
from collections.abc import Callable
from typing import Any

from bindprep.case_rename import CaseRenamePass, rename_targets_from_names
from bindprep.comments import BackfillCommentsPass, ClearCommentsPass
from bindprep.compute_config_hash import compute_config_hash
from bindprep.declaration import ASTContext
from bindprep.documentation_corpus import DocumentationCorpus
from bindprep.dump_declaration_tree import dump_declaration_tree
from bindprep.event_synthesis import GenerateEventEventsPass, GenerateSignalEventsPass
from bindprep.inlines import CompileInlinesPass, ShimBuildRequest, build_inlines
from bindprep.load_config import load_config
from bindprep.load_declaration_tree import load_declaration_tree
from bindprep.module_info import ModuleInfo, module_info_from_config
from bindprep.module_policy import ModulePolicy, policy_for, validate_policy
from bindprep.origin_classifier import OriginClassifier
from bindprep.parser_options import build_parser_options
from bindprep.pipeline import Pipeline
from bindprep.pipeline_report import PipelineReport
from bindprep.structural_normalizer import ResolveGenerationKinds, StructuralNormalizer
from bindprep.visibility_pruner import VisibilityPruner


def build_pipeline(
    info: ModuleInfo,
    config: dict[str, Any],
    policy: ModulePolicy,
    corpus: DocumentationCorpus,
    shim_request: ShimBuildRequest | None = None,
    shim_builder: Callable[[ShimBuildRequest], None] | None = None,
) -> Pipeline:
    """Assemble the ordered pass list for a module.

    Preprocessing (origin, visibility, structure, resolve) settles every
    generation kind; postprocessing (comments, rename, events) depends on that
    classification and on final names. The shim trigger runs last.
    """
    visibility = config["visibility"]
    events = config["events"]
    pruner = VisibilityPruner(visibility["private_prefix"], visibility["private_suffix"])
    passes = [
        OriginClassifier(info.include_root(), pruner),
        StructuralNormalizer(policy),
        ResolveGenerationKinds(),
        ClearCommentsPass(),
        BackfillCommentsPass(corpus),
        CaseRenamePass(
            rename_targets_from_names(config["rename"]["targets"]),
            config["rename"]["pattern"],
        ),
        GenerateSignalEventsPass(
            events["signal_sections"], events["signal_suffix"], events["collision_prefix"]
        ),
        GenerateEventEventsPass(events["event_base_class"], events["collision_prefix"]),
    ]
    if shim_request is not None:
        passes.append(CompileInlinesPass(shim_request, shim_builder))
    return Pipeline(passes)


def process_module(
    lib: ASTContext,
    info: ModuleInfo,
    config: dict[str, Any],
    corpus: DocumentationCorpus,
    shim_request: ShimBuildRequest | None = None,
    shim_builder: Callable[[ShimBuildRequest], None] | None = None,
) -> Pipeline:
    """Validate the module policy against the tree, then run every pass."""
    policy = policy_for(info.module, config.get("value_types"))
    validate_policy(policy, lib)
    pipeline = build_pipeline(info, config, policy, corpus, shim_request, shim_builder)
    pipeline.run(lib)
    return pipeline


def run_pipeline(args: argparse.Namespace) -> int:
    """Execute the full module-processing run from the command line."""
    config = _init_config(args)
    info = module_info_from_config(config)
    print(f"Processing module {info.module} (include root: {info.include_root()})")

    if not args.tree.exists():
        msg = f"Declaration dump not found: {args.tree}"
        raise SystemExit(msg)
    lib = load_declaration_tree(args.tree)
    corpus = DocumentationCorpus.load(args.docs or info.docs, info.module)
    options = build_parser_options(info)

    out_root = args.out_dir.resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    shim_request = None
    if args.build_inlines or args.request_inlines:
        shim_request = ShimBuildRequest(
            module=info.module,
            inlines_library_name=options.inlines_library_name,
            output_dir=str(out_root),
            qmake=info.qmake,
            make=info.make,
            platform=info.platform,
        )
    builder = build_inlines if args.build_inlines and not args.dry_run else None

    pipeline = process_module(lib, info, config, corpus, shim_request, builder)

    report = PipelineReport(compute_config_hash(config), info.module)
    report.add_pass_stats(pipeline.stats())
    report.extra["parser_options"] = options.to_dict()

    report_path = out_root / config["output"]["report_file"]
    report.generate_report(str(report_path), lib)

    if args.dry_run:
        print(f"Dry run complete. Report generated at {report_path}")
        return 0

    tree_path = out_root / config["output"]["tree_file"].format(module=info.module)
    dump_declaration_tree(lib, tree_path)
    print(f"Wrote processed declaration tree to: {tree_path}")
    return 0


def _init_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load configuration and apply command-line overrides."""
    config = load_config(args.config)
    module = config["module"]
    for key in ("library", "include_path", "library_path", "platform"):
        value = getattr(args, key, None)
        if value:
            module[key] = value
    return config
