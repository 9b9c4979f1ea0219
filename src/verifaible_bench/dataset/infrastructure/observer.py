"""Structlog implementation of the DatasetObserver port."""

import structlog


class StructlogDatasetObserver:
    """Delegates dataset domain events to structlog.

    Satisfies the DatasetObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def dataset_loading_started(self, path: str) -> None:
        self._log.info("dataset.loading_started", path=path)

    def dataset_case_loaded(self, case_id: str, category: str) -> None:
        self._log.debug("dataset.case_loaded", case_id=case_id, category=category)

    def dataset_loading_completed(
        self, path: str, total_cases: int, version: str
    ) -> None:
        self._log.info(
            "dataset.loading_completed",
            path=path,
            total_cases=total_cases,
            version=version,
        )

    def dataset_loading_failed(self, path: str, reason: str) -> None:
        self._log.error("dataset.loading_failed", path=path, reason=reason)
