"""BatchProcessor: the entry point wiring settings, registry and pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from batchimport.components.registry import ComponentRegistry
from batchimport.core.config import BatchSettings
from batchimport.core.logging import get_logger
from batchimport.core.protocols import IDataMerge
from batchimport.models.job import JobDefinition
from batchimport.models.results import BatchResult
from batchimport.processing.field_matcher import extract_fields
from batchimport.processing.row_pipeline import RowPipeline
from batchimport.validation.job_validator import JobCheck, Violation, ensure_valid_job, validate_job

logger = get_logger(__name__)


class BatchProcessor:
    """Runs job definitions end to end.

    Settings and the component registry are injected at construction time;
    the merge engine is passed per call to ``run``.
    """

    def __init__(
        self,
        *,
        settings: BatchSettings,
        registry: ComponentRegistry,
        extra_checks: tuple[JobCheck, ...] = (),
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._extra_checks = extra_checks
        self._pipeline = RowPipeline(registry)

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    def new_job(self, **kwargs: Any) -> JobDefinition:
        return self._settings.new_job(**kwargs)

    def extract_fields(self, job: JobDefinition, file_name: str, working_file: str | Path) -> JobDefinition:
        return extract_fields(job, file_name, working_file, registry=self._registry)

    def validate(self, job: JobDefinition) -> list[Violation]:
        return validate_job(job, self._extra_checks)

    def process(self, job: JobDefinition) -> BatchResult:
        """Validate the definition, then produce the cleaned record set."""
        ensure_valid_job(job, self._extra_checks)
        return self._pipeline.process(job)

    def run(self, job: JobDefinition, merger: IDataMerge) -> tuple[BatchResult, list[dict[str, Any]]]:
        """Process ``job`` and hand the cleaned records to ``merger``."""
        result = self.process(job)
        logger.info(
            "batch_merge_started",
            job_id=job.id,
            target_table=result.merge.target_table,
            records=len(result.records),
        )
        output = merger.merge(result.merge, result.records)
        logger.info("batch_merge_completed", job_id=job.id, changes=len(output))
        return result, output
