"""Fake DatasetObserver for use in tests — records events without mocking."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadingStartedEvent:
    path: str


@dataclass(frozen=True)
class CaseLoadedEvent:
    case_id: str
    category: str


@dataclass(frozen=True)
class LoadingCompletedEvent:
    path: str
    total_cases: int
    version: str


@dataclass(frozen=True)
class LoadingFailedEvent:
    path: str
    reason: str


class FakeDatasetObserver:
    def __init__(self) -> None:
        self.loading_started: list[LoadingStartedEvent] = []
        self.cases_loaded: list[CaseLoadedEvent] = []
        self.loading_completed: list[LoadingCompletedEvent] = []
        self.loading_failed: list[LoadingFailedEvent] = []

    def dataset_loading_started(self, path: str) -> None:
        self.loading_started.append(LoadingStartedEvent(path=path))

    def dataset_case_loaded(self, case_id: str, category: str) -> None:
        self.cases_loaded.append(CaseLoadedEvent(case_id=case_id, category=category))

    def dataset_loading_completed(self, path: str, total_cases: int, version: str) -> None:
        self.loading_completed.append(
            LoadingCompletedEvent(path=path, total_cases=total_cases, version=version)
        )

    def dataset_loading_failed(self, path: str, reason: str) -> None:
        self.loading_failed.append(LoadingFailedEvent(path=path, reason=reason))
