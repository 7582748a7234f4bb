"""Builds the merge definition that accompanies a cleaned record set."""

from __future__ import annotations

from batchimport.models.job import JobDefinition
from batchimport.models.results import MergeColumn, MergeDefinition


def create_merge_definition(job: JobDefinition) -> MergeDefinition:
    """Describe the target table and the active columns for the merge engine."""
    return MergeDefinition(
        target_table=job.target_table,
        include_insert=job.can_insert,
        include_update=job.can_update,
        include_delete=job.can_delete,
        columns=[
            MergeColumn(
                name=m.name,
                native_type=m.native_type,
                data_type=m.data_type.value,
                can_insert=m.can_insert,
                can_update=m.can_update,
                is_key=m.is_key,
            )
            for m in job.active_fields()
        ],
    )
