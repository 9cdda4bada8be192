"""Abstract repository interface (port) for extraction jobs and their script files."""

from abc import ABC, abstractmethod
from typing import Any

from js_extractor.domain.entities import ExtractionJob, ScriptFile


class ExtractionJobRepository(ABC):
    """Port for job persistence — implemented in the infrastructure layer.

    Every call is atomic with respect to a single job record: concurrent jobs
    never see each other's partial updates.
    """

    @abstractmethod
    async def create(self, source_url: str) -> ExtractionJob:
        """Create a pending job for ``source_url`` with zeroed counters and no logs.

        Raises InvalidSourceUrlError when no host can be derived from the URL.
        """
        ...

    @abstractmethod
    async def get_by_id(self, job_id: str) -> ExtractionJob | None:
        """Retrieve a single job by ID."""
        ...

    @abstractmethod
    async def update(self, job_id: str, **fields: Any) -> ExtractionJob | None:
        """Merge ``fields`` into the job; return None if the job does not exist."""
        ...

    @abstractmethod
    async def get_recent(self, limit: int = 10) -> list[ExtractionJob]:
        """Retrieve jobs, most recently created first."""
        ...

    @abstractmethod
    async def add_script_file(self, script_file: ScriptFile) -> ScriptFile:
        """Persist a download outcome and return it with the generated ID.

        Raises EntityNotFoundError when the owning job does not exist.
        """
        ...

    @abstractmethod
    async def get_script_files(self, job_id: str) -> list[ScriptFile]:
        """Retrieve a job's download outcomes in the order they were recorded."""
        ...
