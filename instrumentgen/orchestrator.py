"""Pipeline orchestration for generation passes."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .config import CONFIG_FILENAME, InstrumentGenConfig, load_config
from .discovery import Candidate, SourceIndex
from .errors import GenerationCancelled, GenerationError
from .logging import get_logger
from .models import Diagnostic, GeneratedArtifact, Severity, SourceManifest, TypeIdentity
from .source_scanner import SourceScanner
from .synthesis import ClassAssembler, Reason, evaluate_eligibility


@dataclass
class GenerationResult:
    """Artifacts and diagnostics of one pass."""

    root: Path
    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)


@dataclass(frozen=True)
class CandidateReport:
    """Eligibility verdict for one candidate, used by ``instrumentgen check``."""

    candidate: Candidate
    reason: Reason


@dataclass(frozen=True)
class _Outcome:
    artifact: Optional[GeneratedArtifact] = None
    diagnostic: Optional[Diagnostic] = None


class Orchestrator:
    """Runs the scan → resolve → assemble → emit pipeline over a source tree."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        assembler: ClassAssembler | None = None,
    ) -> None:
        self.scanner = scanner
        self._assembler_override = assembler
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str,
        *,
        output: str | None = None,
        dry_run: bool = False,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        """Generate wrappers for every eligible candidate under ``path``."""
        root = Path(path).expanduser().resolve()
        self.logger.info("Starting generation pass for %s", root)
        config = self._load_config(root)
        index = self._build_index(root, config)
        assembler = self._resolve_assembler(config)

        result = GenerationResult(root=root)
        candidates = self._unique_candidates(index, index.candidates(), result)
        self.logger.debug("Found %d candidates", len(candidates))

        outcomes = self._assemble_all(index, assembler, candidates, config.workers, cancel)
        for outcome in outcomes:
            if outcome.diagnostic is not None:
                result.diagnostics.append(outcome.diagnostic)
            if outcome.artifact is not None:
                result.artifacts.append(outcome.artifact)
        result.artifacts.sort(key=lambda artifact: artifact.name)

        output_dir = Path(output).expanduser().resolve() if output else config.output.directory
        result.artifacts = self._placeable(root, result.artifacts, output_dir, result.diagnostics)

        for diagnostic in result.diagnostics:
            self._log_diagnostic(diagnostic)

        if dry_run:
            self.logger.info("Dry run: %d artifacts not written", len(result.artifacts))
            return result

        for artifact in result.artifacts:
            result.written.append(self._write_artifact(root, artifact, output_dir))
        self.logger.info("Wrote %d wrapper modules", len(result.written))
        return result

    def run_check(self, path: str) -> List[CandidateReport]:
        """Return the eligibility verdict of every candidate under ``path``."""
        root = Path(path).expanduser().resolve()
        config = self._load_config(root)
        index = self._build_index(root, config)
        return [
            CandidateReport(
                candidate=candidate,
                reason=evaluate_eligibility(index.resolve(candidate)).reason,
            )
            for candidate in index.candidates()
        ]

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_config(self, root: Path) -> InstrumentGenConfig:
        config = load_config(root)
        if (root / CONFIG_FILENAME).exists():
            self.logger.debug("Loaded %s", root / CONFIG_FILENAME)
        return config

    def _build_index(self, root: Path, config: InstrumentGenConfig) -> SourceIndex:
        scanner = self.scanner or SourceScanner()
        manifest: SourceManifest = scanner.scan(str(root), config)
        self.logger.debug("Scanner discovered %d modules", len(manifest.files))
        return SourceIndex.from_manifest(manifest, marker=config.marker)

    def _resolve_assembler(self, config: InstrumentGenConfig) -> ClassAssembler:
        if self._assembler_override is not None:
            return self._assembler_override
        return ClassAssembler(
            header=config.header,
            runtime_module=config.tracing.runtime_module,
            suffix=config.output.suffix,
        )

    def _unique_candidates(
        self, index: SourceIndex, candidates: Sequence[Candidate], result: GenerationResult
    ) -> List[Candidate]:
        """Keep one candidate per identity, preferring the first eligible one."""
        groups: Dict[Tuple[str, TypeIdentity], List[Candidate]] = {}
        for candidate in candidates:
            groups.setdefault((candidate.file.import_root, candidate.identity), []).append(candidate)

        unique: List[Candidate] = []
        for group in groups.values():
            kept = next(
                (c for c in group if evaluate_eligibility(index.resolve(c)).eligible),
                group[0],
            )
            unique.append(kept)
            for candidate in group:
                if candidate is kept:
                    continue
                result.diagnostics.append(
                    Diagnostic(
                        code="duplicate",
                        severity=Severity.WARNING,
                        message=(
                            f"{candidate.identity.qualified_name} is marked more than once; "
                            f"the declaration at {kept.origin} generates the wrapper"
                        ),
                        origin=candidate.origin,
                    )
                )
        return sorted(unique, key=lambda candidate: candidate.origin)

    def _placeable(
        self,
        root: Path,
        artifacts: Sequence[GeneratedArtifact],
        output_dir: Path | None,
        diagnostics: List[Diagnostic],
    ) -> List[GeneratedArtifact]:
        """Drop artifacts that cannot be written where they belong.

        Relative imports only resolve next to the source package, and two
        artifacts never share a target file.
        """
        targets: Dict[Path, GeneratedArtifact] = {}
        placeable: List[GeneratedArtifact] = []
        for artifact in artifacts:
            name = artifact.source.qualified_name
            if output_dir is not None and artifact.relative_imports:
                diagnostics.append(
                    Diagnostic(
                        code="relative-import",
                        severity=Severity.ERROR,
                        message=(
                            f"{name}: relative imports do not resolve from {output_dir}; "
                            "use absolute imports or write wrappers next to their sources"
                        ),
                        origin=artifact.origin,
                    )
                )
                continue
            target = self._target(root, artifact, output_dir)
            previous = targets.get(target)
            if previous is not None:
                diagnostics.append(
                    Diagnostic(
                        code="duplicate-artifact",
                        severity=Severity.ERROR,
                        message=(
                            f"{name}: {target} is already generated for "
                            f"{previous.source.qualified_name}"
                        ),
                        origin=artifact.origin,
                    )
                )
                continue
            targets[target] = artifact
            placeable.append(artifact)
        return placeable

    def _assemble_all(
        self,
        index: SourceIndex,
        assembler: ClassAssembler,
        candidates: Sequence[Candidate],
        workers: int,
        cancel: threading.Event | None,
    ) -> List[_Outcome]:
        def _run(candidate: Candidate) -> _Outcome:
            if cancel is not None and cancel.is_set():
                raise GenerationCancelled("Generation pass cancelled")
            return self._assemble_one(index, assembler, candidate)

        if workers <= 1 or len(candidates) <= 1:
            outcomes = [_run(candidate) for candidate in candidates]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(_run, candidates))

        # Work finished after a cancellation request is discarded as a whole.
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled("Generation pass cancelled")
        return outcomes

    def _assemble_one(
        self, index: SourceIndex, assembler: ClassAssembler, candidate: Candidate
    ) -> _Outcome:
        descriptor = index.resolve(candidate)
        try:
            assembled = assembler.assemble(descriptor)
        except GenerationError as exc:
            return _Outcome(
                diagnostic=Diagnostic(
                    code=exc.code,
                    severity=Severity.ERROR,
                    message=f"{candidate.identity.qualified_name}: {exc}",
                    origin=exc.origin or candidate.origin,
                )
            )
        if assembled.artifact is None:
            return _Outcome(
                diagnostic=Diagnostic(
                    code=assembled.eligibility.reason.value,
                    severity=Severity.INFO,
                    message=_SKIP_MESSAGES[assembled.eligibility.reason].format(
                        name=candidate.identity.qualified_name
                    ),
                    origin=candidate.origin,
                )
            )
        return _Outcome(artifact=assembled.artifact)

    def _write_artifact(
        self, root: Path, artifact: GeneratedArtifact, output_dir: Path | None
    ) -> Path:
        target = self._target(root, artifact, output_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.text, encoding="utf-8")
        self.logger.debug("Wrote %s", target)
        return target

    @staticmethod
    def _target(root: Path, artifact: GeneratedArtifact, output_dir: Path | None) -> Path:
        directory = output_dir or (root / (artifact.directory or ""))
        return directory / artifact.name

    def _log_diagnostic(self, diagnostic: Diagnostic) -> None:
        if diagnostic.severity is Severity.ERROR:
            self.logger.error("%s", diagnostic)
        elif diagnostic.severity is Severity.WARNING:
            self.logger.warning("%s", diagnostic)
        else:
            self.logger.info("%s", diagnostic)


_SKIP_MESSAGES: Dict[Reason, str] = {
    Reason.UNRESOLVED: "{name} is not importable under a dotted module name; no wrapper generated",
    Reason.MISSING_MARKER: "{name} does not carry the instrumentation marker; no wrapper generated",
    Reason.NOT_ABSTRACT: "{name} is not abstract (derive from ABC); no wrapper generated",
}


__all__ = ["CandidateReport", "GenerationResult", "Orchestrator"]
