"""
MutationEngine: candidate selection, isolated transform attempts and result
aggregation.

Pipeline for every request:
1. Validate the request (paths, count / bug report / target lines, transform name)
2. Parse the input file and build the SyntaxIndex
3. Select candidates with the request's strategy
4. For every (candidate, transform) pair: check, clone, correlate, apply, render, write
5. Aggregate mutants and failed attempts into a MutationResult
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from equimutant.exceptions import CorrelationError, InvalidArgumentError, MutantWriteError
from equimutant.index import SyntaxIndex, build_index, correlate
from equimutant.index.tree_utils import first_statement_in_block
from equimutant.logging_config import logger
from equimutant.parser import parse_file, render, reparse
from equimutant.parser.nodes import SyntaxNode, SyntaxTree
from equimutant.schemas import (
    AttemptRecord,
    BugReport,
    Mutant,
    MutationOutcome,
    MutationResult,
    NodeDescriptor,
    SelectionResult,
)
from equimutant.strategy import (
    GuidedStrategy,
    RandomStrategy,
    TargetStrategy,
    validate_bug_report,
    validate_target_lines,
)
from equimutant.tracing import trace
from equimutant.transform import Transform, TransformRegistry
from .config import get_mutation_config
from .validation import (
    validate_count,
    validate_guided_request,
    validate_random_request,
    validate_target_request,
)
from .writer import MutantWriter

PathLike = Union[str, Path]


@dataclass
class _PairOutcome:
    """What one (candidate, transform) pair produced."""
    applicable: int = 0
    mutants: List[Mutant] = field(default_factory=list)
    failures: List[AttemptRecord] = field(default_factory=list)


class MutationEngine:
    """
    Drives candidate x transform iteration over one input file per request.

    Every attempt mutates its own re-parsed copy of the input, so attempts
    never observe each other's edits and may run on a thread pool
    (config["max_workers"] > 1). Results keep candidate-then-transform order.
    """

    def __init__(
        self,
        registry: TransformRegistry,
        writer: Optional[MutantWriter] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            registry: Transforms available to this engine
            writer: Mutant writer; a fresh one (own sequence counter) by default
            config: Overrides for the mutation config
        """
        self.registry = registry
        self.config = {**get_mutation_config(), **(config or {})}
        self.writer = writer or MutantWriter(extension=self.config["mutant_extension"])

        logger.debug(f"MutationEngine initialized with {len(registry)} transforms")

    # Request entry points

    @trace
    def run_random(
        self,
        input_path: PathLike,
        output_dir: PathLike,
        count: int = 5,
        plugin_name: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> MutationResult:
        """
        Mutate randomly sampled nodes.

        Args:
            input_path: Java source file
            output_dir: Directory for mutant files
            count: Nodes to sample; 0 means the configured default
            plugin_name: Restrict the run to one transform
            seed: Seed for reproducible sampling

        Returns:
            MutationResult; success is True iff at least one mutant was written

        Raises:
            InvalidArgumentError: On invalid arguments (before the file is read)
            InputFileError, ParserError: If the input cannot be read or parsed
        """
        transforms = validate_random_request(input_path, output_dir, count, self.registry, plugin_name)
        wanted = count if count > 0 else self.config["default_random_count"]
        logger.info(f"Random mutation of {input_path}: {wanted} nodes, transform={plugin_name or 'all'}")

        strategy = RandomStrategy(seed)
        metadata = self._base_metadata(strategy.name, input_path, output_dir, plugin_name, transforms)
        metadata.update(random_count=wanted, seed=seed)

        return self._run(
            input_path,
            output_dir,
            transforms,
            metadata,
            lambda index: strategy.select(index, wanted),
            "No nodes found for random selection",
        )

    @trace
    def run_guided(
        self,
        input_path: PathLike,
        output_dir: PathLike,
        bug_report: Optional[BugReport],
        plugin_name: Optional[str] = None,
    ) -> MutationResult:
        """
        Mutate the nodes a bug report points at, plus their data-flow sources.

        Raises:
            BugReportError: If the report is missing, has has_bugs=False or no lines
            PluginNotFoundError: If plugin_name is unknown
            InputFileError, ParserError: If the input cannot be read or parsed
        """
        transforms = validate_guided_request(input_path, output_dir, bug_report, self.registry, plugin_name)
        logger.info(f"Guided mutation of {input_path}: bug lines {bug_report.lines}")

        strategy = GuidedStrategy()
        metadata = self._base_metadata(strategy.name, input_path, output_dir, plugin_name, transforms)
        metadata["bug_lines"] = list(bug_report.lines)

        return self._run(
            input_path,
            output_dir,
            transforms,
            metadata,
            lambda index: strategy.select(index, bug_report),
            "No candidate nodes found by guided strategy",
        )

    @trace
    def run_target(
        self,
        input_path: PathLike,
        output_dir: PathLike,
        target_lines: Optional[Sequence[int]],
        plugin_name: Optional[str] = None,
    ) -> MutationResult:
        """
        Mutate every node starting on one of `target_lines`.

        An empty line list is a successful request with nothing to do.

        Raises:
            InvalidArgumentError: If target_lines is None or holds None or non-positive entries
            PluginNotFoundError: If plugin_name is unknown
            InputFileError, ParserError: If the input cannot be read or parsed
        """
        transforms = validate_target_request(input_path, output_dir, target_lines, self.registry, plugin_name)
        lines = list(target_lines)

        strategy = TargetStrategy()
        metadata = self._base_metadata(strategy.name, input_path, output_dir, plugin_name, transforms)
        metadata["target_lines"] = lines

        if not lines:
            logger.info(f"Target mutation of {input_path}: no target lines requested")
            metadata.update(candidate_count=0, mutants_generated=0, transforms_applied=[], duration_ms=0.0)
            return MutationResult(success=True, outcome=MutationOutcome.NOTHING_REQUESTED, metadata=metadata)

        logger.info(f"Target mutation of {input_path}: lines {lines}")
        return self._run(
            input_path,
            output_dir,
            transforms,
            metadata,
            lambda index: strategy.select(index, lines),
            f"No candidate nodes found on target lines: {lines}",
        )

    @trace
    def select(
        self,
        input_path: PathLike,
        strategy: str = "random",
        count: int = 0,
        seed: Optional[int] = None,
        bug_report: Optional[BugReport] = None,
        target_lines: Optional[Sequence[int]] = None,
    ) -> SelectionResult:
        """
        Dry run: report the candidates a strategy would pick, without mutating.

        Args:
            input_path: Java source file
            strategy: "random", "guided" or "target"
            count: Sample size for random selection (0 means the configured default)
            seed: Seed for random selection
            bug_report: Report for guided selection
            target_lines: Lines for target selection

        Raises:
            InvalidArgumentError: On an unknown strategy or invalid strategy arguments
            InputFileError, ParserError: If the input cannot be read or parsed
        """
        if input_path is None or not str(input_path).strip():
            raise InvalidArgumentError("Input path cannot be null or empty")

        # Strategy arguments are checked before the file is read
        if strategy == "random":
            validate_count(count)
            wanted = count if count > 0 else self.config["default_random_count"]
            extra = {"random_count": wanted, "seed": seed}
        elif strategy == "guided":
            validate_bug_report(bug_report)
            extra = {"bug_lines": list(bug_report.lines)}
        elif strategy == "target":
            extra = {"target_lines": validate_target_lines(target_lines)}
        else:
            raise InvalidArgumentError(f"Unknown strategy: {strategy}. Use random, guided or target")

        tree = parse_file(input_path)
        index = build_index(tree)

        if strategy == "random":
            chosen = RandomStrategy(seed)
            candidates = chosen.select(index, wanted)
        elif strategy == "guided":
            chosen = GuidedStrategy()
            candidates = chosen.select(index, bug_report)
        else:
            chosen = TargetStrategy()
            candidates = chosen.select(index, target_lines)

        return SelectionResult(
            strategy=chosen.name,
            input_path=str(input_path),
            candidates=[NodeDescriptor.from_node(node) for node in candidates],
            metadata={"node_count": len(index), **extra},
        )

    # Core loop

    def mutate(
        self,
        tree: SyntaxTree,
        index: SyntaxIndex,
        candidates: Sequence[SyntaxNode],
        transforms: Sequence[Transform],
        input_path: Optional[PathLike],
        output_dir: PathLike,
    ) -> Tuple[List[Mutant], List[AttemptRecord], int]:
        """
        Try every transform on every candidate.

        Args:
            tree: Parsed input; never edited here
            index: Index of `tree`, shared read-only by all attempts
            candidates: Selected nodes of `tree`
            transforms: Working set, in registration order
            input_path: Original file path (for headers and file names)
            output_dir: Directory for mutant files

        Returns:
            (mutants, failed attempts, number of applicable nodes found by checks)
        """
        pairs = [(candidate, transform) for candidate in candidates for transform in transforms]
        workers = int(self.config.get("max_workers", 1))

        if workers > 1 and len(pairs) > 1:
            logger.debug(f"Running {len(pairs)} attempts on {workers} workers")
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(
                    lambda pair: self._attempt(tree, index, pair[0], pair[1], input_path, output_dir),
                    pairs,
                ))
        else:
            outcomes = [
                self._attempt(tree, index, candidate, transform, input_path, output_dir)
                for candidate, transform in pairs
            ]

        mutants: List[Mutant] = []
        failures: List[AttemptRecord] = []
        applicable = 0
        for outcome in outcomes:
            applicable += outcome.applicable
            mutants.extend(outcome.mutants)
            failures.extend(outcome.failures)
        return mutants, failures, applicable

    def _attempt(
        self,
        tree: SyntaxTree,
        index: SyntaxIndex,
        candidate: SyntaxNode,
        transform: Transform,
        input_path: Optional[PathLike],
        output_dir: PathLike,
    ) -> _PairOutcome:
        outcome = _PairOutcome()
        plugin = transform.name

        try:
            # A check that returns None means "nothing applicable"
            applicable = list(transform.check(index, candidate) or [])
        except Exception as e:
            logger.warning(f"{plugin}.check failed on {candidate.describe()}: {e}")
            outcome.failures.append(self._failure(
                plugin, candidate, "apply_failed", f"check raised {type(e).__name__}: {e}"
            ))
            return outcome

        outcome.applicable = len(applicable)
        for node in applicable:
            if not isinstance(node, SyntaxNode):
                logger.warning(f"{plugin}.check returned {type(node).__name__} for {candidate.describe()}")
                outcome.failures.append(self._failure(
                    plugin, candidate, "apply_failed",
                    f"check returned {type(node).__name__}, not a syntax node",
                ))
                continue

            clone = reparse(tree)
            clone_index = build_index(clone)

            try:
                new_target = correlate(clone_index, node)
                new_source = correlate(clone_index, candidate)
            except CorrelationError as e:
                outcome.failures.append(self._failure(plugin, node, "correlation_failed", str(e)))
                continue
            if new_target is None or new_source is None:
                missing = node if new_target is None else candidate
                outcome.failures.append(self._failure(
                    plugin, node, "correlation_failed", f"Node correlation mismatch for {missing.describe()}"
                ))
                continue

            try:
                applied = transform.apply(new_target, clone, first_statement_in_block(new_source), new_source)
                if not applied:
                    outcome.failures.append(self._failure(
                        plugin, node, "apply_failed", f"{plugin} declined {node.describe()}"
                    ))
                    continue
                mutant_text = render(clone)
            except Exception as e:
                logger.debug(f"{plugin} failed on {node.describe()}: {e}")
                outcome.failures.append(self._failure(
                    plugin, node, "apply_failed", f"{type(e).__name__}: {e}"
                ))
                continue

            try:
                mutant = self.writer.create_mutant(plugin, node, mutant_text, input_path, output_dir)
            except MutantWriteError as e:
                logger.warning(str(e))
                outcome.failures.append(self._failure(plugin, node, "write_failed", str(e)))
                continue

            logger.debug(f"{plugin} applied to {node.describe()} -> {mutant.output_path}")
            outcome.mutants.append(mutant)

        return outcome

    # Helpers

    def _run(self, input_path, output_dir, transforms, metadata, pick, no_candidates_message) -> MutationResult:
        start = time.perf_counter()

        if not transforms:
            metadata.update(candidate_count=0, mutants_generated=0, transforms_applied=[], duration_ms=0.0)
            message = f"No transforms available for: {metadata['specific_transform'] or 'all'}"
            logger.warning(message)
            return MutationResult(
                success=False,
                outcome=MutationOutcome.NO_TRANSFORMS,
                error_messages=[message],
                metadata=metadata,
            )

        tree = parse_file(input_path)
        index = build_index(tree)
        candidates = pick(index)
        metadata["candidate_count"] = len(candidates)

        if not candidates:
            metadata.update(mutants_generated=0, transforms_applied=[], duration_ms=self._elapsed(start))
            logger.info(no_candidates_message)
            return MutationResult(
                success=False,
                outcome=MutationOutcome.NO_CANDIDATES,
                error_messages=[no_candidates_message],
                metadata=metadata,
            )

        mutants, failures, applicable = self.mutate(tree, index, candidates, transforms, input_path, output_dir)
        return self._aggregate(mutants, failures, applicable, candidates, transforms, metadata, start)

    def _aggregate(self, mutants, failures, applicable, candidates, transforms, metadata, start) -> MutationResult:
        metadata.update(
            plugin_attempt_count=applicable,
            failed_attempt_count=len(failures),
            mutants_generated=len(mutants),
            transforms_applied=sorted({m.plugin_name for m in mutants}),
            duration_ms=self._elapsed(start),
        )
        failure_messages = [f"{f.plugin_name} at {f.candidate.label()}: {f.message}" for f in failures]

        if mutants:
            outcome = MutationOutcome.SUCCESS
            messages = failure_messages
        elif applicable == 0:
            outcome = MutationOutcome.NO_APPLICABLE_TRANSFORM
            messages = [
                f"No transform was applicable to any of the {len(candidates)} candidate nodes "
                f"({len(transforms)} transforms tried)"
            ]
        else:
            outcome = MutationOutcome.ALL_ATTEMPTS_FAILED
            messages = [f"All {applicable} mutation attempts failed"] + failure_messages

        logger.info(
            f"{metadata['strategy']}: {len(mutants)} mutants from {len(candidates)} candidates, "
            f"{applicable} attempts, {len(failures)} failed"
        )
        return MutationResult(
            success=bool(mutants),
            outcome=outcome,
            mutants=mutants,
            error_messages=messages,
            attempts=failures,
            metadata=metadata,
        )

    @staticmethod
    def _base_metadata(strategy, input_path, output_dir, plugin_name, transforms) -> Dict[str, Any]:
        return {
            "strategy": strategy,
            "input_path": str(input_path),
            "output_dir": str(output_dir),
            "specific_transform": plugin_name.strip() if plugin_name and plugin_name.strip() else None,
            "transform_count": len(transforms),
            "candidate_count": 0,
            "plugin_attempt_count": 0,
            "failed_attempt_count": 0,
        }

    @staticmethod
    def _failure(plugin: str, node: SyntaxNode, status: str, message: str) -> AttemptRecord:
        return AttemptRecord(
            plugin_name=plugin,
            candidate=NodeDescriptor.from_node(node),
            status=status,
            message=message,
        )

    @staticmethod
    def _elapsed(start: float) -> float:
        return round((time.perf_counter() - start) * 1000, 3)
