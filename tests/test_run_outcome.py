from __future__ import annotations

from nfl_ingest.ingestion.providers.base.errors import (
    CircuitOpenError,
    ProviderRateLimited,
    ProviderRequestError,
    ProviderStatusError,
    ProviderTimeout,
    is_transient,
)
from nfl_ingest.ingestion.providers.base.types import (
    MAX_RUN_ERRORS,
    FailureKind,
    FetchFailure,
    RunOutcome,
)


def test_aggregate_succeeds_when_all_children_succeed() -> None:
    out = RunOutcome.aggregate("all", [RunOutcome.success(2, "a"), RunOutcome.success(0, "b")])
    assert out.succeeded
    assert out.records_processed == 2


def test_aggregate_partial_success_keeps_child_errors() -> None:
    out = RunOutcome.aggregate(
        "mixed",
        [RunOutcome.success(3, "a"), RunOutcome.failure("week 2 failed", ["timeout"], failed=1)],
    )
    assert out.succeeded
    assert out.records_processed == 3
    assert out.records_failed == 1
    assert out.errors == ["week 2 failed", "timeout"]


def test_aggregate_fails_when_nothing_got_through() -> None:
    out = RunOutcome.aggregate("none", [RunOutcome.failure("x"), RunOutcome.success(0, "empty")])
    assert not out.succeeded


def test_errors_are_bounded() -> None:
    out = RunOutcome.failure("many", [f"e{i}" for i in range(100)])
    assert len(out.errors) == MAX_RUN_ERRORS
    assert out.errors[0] == "e0"

    direct = RunOutcome(succeeded=False, errors=[str(i) for i in range(40)])
    assert len(direct.errors) == MAX_RUN_ERRORS


def test_transient_classification() -> None:
    assert is_transient(ProviderTimeout("slow"))
    assert is_transient(ProviderRequestError("reset"))
    assert is_transient(ProviderRateLimited())
    for code in (408, 500, 502, 503, 504):
        assert is_transient(ProviderStatusError("x", status_code=code))
    assert not is_transient(ProviderStatusError("x", status_code=404))
    assert not is_transient(CircuitOpenError("open"))


def test_failure_kind_from_error() -> None:
    assert FetchFailure.from_error(ProviderTimeout("slow")).kind == FailureKind.TIMEOUT
    assert FetchFailure.from_error(ProviderRateLimited(), attempts=3).describe().endswith(
        "(after 3 attempts)"
    )
    assert FetchFailure.from_error(CircuitOpenError("open"), attempts=0).kind == FailureKind.CIRCUIT_OPEN
