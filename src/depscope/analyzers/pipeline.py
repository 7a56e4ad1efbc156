"""End-to-end analysis pipeline for project dependencies."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from depscope.adapters.base import BaseAdapter, PackageNotFoundError, RegistryError
from depscope.analyzers.alternatives import get_alternative
from depscope.analyzers.maintenance import analyze_maintenance
from depscope.analyzers.popularity import analyze_popularity
from depscope.analyzers.scorer import Scorer
from depscope.analyzers.security import analyze_security
from depscope.analyzers.size import analyze_size
from depscope.models.schemas import (
    DependencyResult,
    DependencySpec,
    DependencyType,
    Grade,
    MaintenanceSignal,
    Manifest,
    PopularitySignal,
    ProjectResult,
    SecuritySignal,
    SignalBundle,
    SizeSignal,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Package not found or network error"

ProgressCallback = Callable[[int, int, str], None]


async def _call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a synchronous extractor as an awaitable so it can join a gather."""
    return func(*args, **kwargs)


class AnalysisPipeline:
    """Orchestrates dependency analysis.

    Pipeline stages, per dependency:
    1. Fetch registry metadata from the adapter
    2. Run the four signal extractors concurrently
    3. Score and grade the signals
    Then, for the project, aggregate every dependency score.

    Failures never abort sibling analyses: a dependency whose metadata
    cannot be fetched is reported with score 0 and grade F, and a failed
    extractor only leaves its own signal missing.
    """

    def __init__(
        self,
        adapter: BaseAdapter,
        scorer: Scorer | None = None,
        max_concurrency: int = 0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            adapter: Package registry adapter.
            scorer: Scorer to use. Defaults to a new Scorer.
            max_concurrency: Maximum dependencies analyzed at once (0 = unbounded).
            clock: Returns the current time; used for publish age.
        """
        self.adapter = adapter
        self.scorer = scorer or Scorer()
        self.max_concurrency = max_concurrency
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch_signals(self, spec: DependencySpec, package_info: dict[str, Any]) -> SignalBundle:
        """Run all signal extractors for a package that was found.

        Args:
            spec: The declared dependency.
            package_info: Registry metadata for the package.

        Returns:
            SignalBundle where any extractor that failed is left missing.
        """
        outcomes = await asyncio.gather(
            _call(analyze_maintenance, package_info, now=self._clock()),
            analyze_popularity(self.adapter, spec.name),
            _call(analyze_size, package_info),
            analyze_security(spec.name, spec.version_constraint),
            return_exceptions=True,
        )

        signals = {}
        for dimension, outcome in zip(("maintenance", "popularity", "size", "security"), outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"{dimension} analysis failed for {spec.name}: {outcome}")
                signals[dimension] = None
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                signals[dimension] = outcome

        return SignalBundle(**signals)

    async def analyze_package(
        self,
        spec: DependencySpec,
        dependency_type: DependencyType = DependencyType.PRODUCTION,
    ) -> DependencyResult:
        """Analyze a single dependency.

        Args:
            spec: The declared dependency.
            dependency_type: Manifest section the dependency came from.

        Returns:
            DependencyResult. Acquisition failures are reported in the
            result, never raised.
        """
        try:
            package_info = await self.adapter.get_package_info(spec.name)
        except PackageNotFoundError:
            logger.info(f"Package not found: {spec.name}")
            return self._failed_result(spec, dependency_type, NOT_FOUND_MESSAGE)
        except RegistryError as e:
            logger.warning(f"Could not fetch metadata for {spec.name}: {e.reason}")
            return self._failed_result(spec, dependency_type, NOT_FOUND_MESSAGE)

        latest_version = (package_info.get("dist-tags") or {}).get("latest") or "unknown"
        signals = await self.fetch_signals(spec, package_info)
        score = self.scorer.score(signals)

        return DependencyResult(
            name=spec.name,
            version_constraint=spec.version_constraint,
            dependency_type=dependency_type,
            latest_version=str(latest_version),
            maintenance=signals.maintenance,
            popularity=signals.popularity,
            size=signals.size,
            security=signals.security,
            alternative=get_alternative(spec.name),
            score=score,
            grade=self.scorer.grade(score),
        )

    def _failed_result(
        self,
        spec: DependencySpec,
        dependency_type: DependencyType,
        message: str,
    ) -> DependencyResult:
        """Result for a dependency whose signals could not be acquired."""
        return DependencyResult(
            name=spec.name,
            version_constraint=spec.version_constraint,
            dependency_type=dependency_type,
            maintenance=MaintenanceSignal.unknown(),
            popularity=PopularitySignal.unknown(),
            size=SizeSignal.unknown(),
            security=SecuritySignal.clean(),
            alternative=get_alternative(spec.name),
            score=0,
            grade=Grade.F,
            error=message,
        )

    async def analyze_project(
        self,
        manifest: Manifest,
        include_dev: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> ProjectResult:
        """Analyze every in-scope dependency of a project concurrently.

        Args:
            manifest: Declared dependencies.
            include_dev: Also analyze dev dependencies.
            progress_callback: Optional callback(completed, total, package_name).

        Returns:
            ProjectResult with results in declaration order.
        """
        entries = [(spec, DependencyType.PRODUCTION) for spec in manifest.production]
        if include_dev:
            entries += [(spec, DependencyType.DEV) for spec in manifest.dev]

        total = len(entries)
        completed = 0
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        async def run(spec: DependencySpec, dependency_type: DependencyType) -> DependencyResult:
            nonlocal completed
            async with semaphore or contextlib.nullcontext():
                result = await self.analyze_package(spec, dependency_type)
            completed += 1
            if progress_callback:
                try:
                    progress_callback(completed, total, spec.name)
                except Exception as e:
                    # Progress display must not change the analysis outcome
                    logger.warning(f"Progress callback failed for {spec.name}: {e}")
            return result

        outcomes = await asyncio.gather(
            *(run(spec, dependency_type) for spec, dependency_type in entries),
            return_exceptions=True,
        )

        results: list[DependencyResult] = []
        for (spec, dependency_type), outcome in zip(entries, outcomes):
            if isinstance(outcome, Exception):
                # Log but keep the dependency in the report
                logger.error(f"Error analyzing {spec.name}: {outcome}")
                outcome = self._failed_result(spec, dependency_type, str(outcome) or "Analysis failed")
            elif isinstance(outcome, BaseException):
                raise outcome
            results.append(outcome)

        dependencies = [r for r in results if r.dependency_type == DependencyType.PRODUCTION]
        dev_dependencies = [r for r in results if r.dependency_type == DependencyType.DEV]

        project_score = self.scorer.project_score(dependencies, dev_dependencies)
        return ProjectResult(
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
            project_score=project_score,
            project_grade=self.scorer.grade(project_score),
        )
