"""DatasetObserver port — domain events emitted while loading a test set."""

from typing import Protocol


class DatasetObserver(Protocol):
    def dataset_loading_started(self, path: str) -> None: ...

    def dataset_case_loaded(self, case_id: str, category: str) -> None: ...

    def dataset_loading_completed(
        self, path: str, total_cases: int, version: str
    ) -> None: ...

    def dataset_loading_failed(self, path: str, reason: str) -> None: ...
