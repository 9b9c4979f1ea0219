"""JSON test set loader — reads testset.json and returns typed TestCase objects."""

import hashlib
import json
from pathlib import Path
from typing import Any, NoReturn

from pydantic import ValidationError

from verifaible_bench.config.domain.dataset import DatasetConfig
from verifaible_bench.dataset.domain.case import TestCase
from verifaible_bench.dataset.domain.load_result import TestSetLoadResult
from verifaible_bench.dataset.domain.observer import DatasetObserver
from verifaible_bench.dataset.infrastructure.errors import DatasetLoadError


class JsonTestSetLoader:
    """Loads a ``{"version": ..., "cases": [...]}`` test set file."""

    def __init__(self, observer: DatasetObserver) -> None:
        self._observer = observer

    def load(self, config: DatasetConfig) -> TestSetLoadResult:
        """
        Load all cases from the JSON file described by config.

        Collects ALL per-case errors before raising a single DatasetLoadError
        listing every issue found.

        Raises:
            DatasetLoadError: if the file is missing, is not valid JSON, lacks a
                ``cases`` list, or any case is invalid or has a duplicate id.
        """
        path_str = str(config.path)
        self._observer.dataset_loading_started(path=path_str)

        try:
            raw_bytes = self._read_bytes(path=config.path)
        except FileNotFoundError:
            self._fail(path=path_str, reason=f"file not found: {path_str}")

        try:
            document = json.loads(raw_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._fail(path=path_str, reason=f"invalid JSON: {exc}")

        if not isinstance(document, dict) or not isinstance(
            document.get("cases"), list
        ):
            self._fail(path=path_str, reason="expected an object with a 'cases' list")

        cases, errors = self._parse_cases(raw_cases=document["cases"])
        if errors:
            self._fail(path=path_str, reason="; ".join(errors))

        version = str(document.get("version", ""))
        self._observer.dataset_loading_completed(
            path=path_str, total_cases=len(cases), version=version
        )
        return TestSetLoadResult(
            cases=cases,
            version=version,
            sha256=hashlib.sha256(raw_bytes).hexdigest(),
        )

    def _read_bytes(self, path: Path) -> bytes:
        with open(path, "rb") as fh:
            return fh.read()

    def _parse_cases(
        self, raw_cases: list[Any]
    ) -> tuple[list[TestCase], list[str]]:
        """Validate each case, collecting errors without aborting early."""
        cases: list[TestCase] = []
        errors: list[str] = []
        seen_ids: set[str] = set()

        for index, raw in enumerate(raw_cases):
            try:
                case = TestCase.model_validate(raw)
            except ValidationError as exc:
                fields = ", ".join(
                    ".".join(str(part) for part in err["loc"]) or "<root>"
                    for err in exc.errors()
                )
                errors.append(f"case {index}: invalid field(s) {fields}")
                continue

            if case.id in seen_ids:
                errors.append(f"case {index}: duplicate id '{case.id}'")
                continue

            seen_ids.add(case.id)
            cases.append(case)
            self._observer.dataset_case_loaded(case_id=case.id, category=case.category)

        return cases, errors

    def _fail(self, path: str, reason: str) -> NoReturn:
        self._observer.dataset_loading_failed(path=path, reason=reason)
        raise DatasetLoadError(reason=reason)
