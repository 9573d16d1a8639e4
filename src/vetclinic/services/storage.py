"""StorageService — load and save the three record files.

Load fallback rules:

- Missing files are normal on first run and are not reported.
- Malformed lines and unresolvable relations are skipped and counted.
- A non-numeric age anywhere in ``animals.txt`` discards the whole load
  and seeds the sample data, with a warning.
- An unreadable or undecodable file (bad bytes, unknown encoding) is
  handled the same way.
- If nothing at all was loaded, the sample data is seeded.

Save always rewrites all three files; the relations file is rebuilt
from the owners' pet lists.
"""

from __future__ import annotations

import logging

from vetclinic.domain.sample import seed_sample_data
from vetclinic.infrastructure.flatfile import (
    MalformedAgeError,
    RecordReadError,
    RecordWriteError,
    load_records,
    save_records,
)
from vetclinic.services.base import BaseService
from vetclinic.services.result import ServiceResult
from vetclinic.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class StorageService(BaseService):
    """Moves repository state to and from the record files."""

    def _use_sample_data(self) -> None:
        self._repo.clear()
        seed_sample_data(self._repo)

    @traced
    def load_all(self) -> ServiceResult:
        """Replace in-memory state with the record files (or sample data).

        Always succeeds; problems are reported as warnings so the
        session stays usable.
        """
        op = "load_all"
        paths = self._clinic.paths
        warnings: list[str] = []
        report_data: dict[str, object] = {}

        try:
            with trace_span("read_files") as span:
                report = load_records(self._repo, paths)
                if span is not None:
                    span.counts.update(
                        owners=report.owners, animals=report.animals, relations=report.relations
                    )
        except MalformedAgeError as exc:
            logger.warning("Discarding loaded records: %s", exc)
            warnings.append(f"Failed to load data: {exc}; using sample data")
            self._use_sample_data()
            source = "sample"
        except (RecordReadError, OSError) as exc:
            logger.warning("Cannot read record files: %s", exc)
            warnings.append(f"Failed to load data: {exc}; using sample data")
            self._use_sample_data()
            source = "sample"
        else:
            report_data = report.to_dict()
            if self._repo.is_empty():
                logger.info("No saved data found, starting with sample data")
                self._use_sample_data()
                source = "sample"
            else:
                source = "files"

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source": source,
                "data_dir": str(self._clinic.settings.data_dir),
                "animals": len(self._repo.animals),
                "owners": len(self._repo.owners),
                "report": report_data,
            },
            warnings=warnings,
        )

    @traced
    def save_all(self) -> ServiceResult:
        """Overwrite animals, owners, and relations files from memory."""
        op = "save_all"
        paths = self._clinic.paths
        try:
            with trace_span("write_files") as span:
                counts = save_records(self._repo, paths)
                if span is not None:
                    span.counts.update(counts)
        except RecordWriteError as exc:
            logger.warning("Save aborted: %s", exc)
            return ServiceResult.failure(
                op,
                "SAVE_FAILED",
                f"Failed to save data: {exc}",
                file=str(exc.path),
                written=[str(p) for p in exc.written],
            )

        logger.info("Saved %s", counts)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "files": [str(p) for p in paths.all()],
                **counts,
            },
        )
