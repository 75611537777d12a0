"""Metrics hook protocol and no-op default implementation.

The pipeline reports counters and timings at each stage.  Without a
configured backend a :class:`NoopMetricsHook` is used; any object that
satisfies :class:`MetricsHook` can be passed as ``PublishConfig.metrics``
to route the data points to StatsD, Prometheus, and so on.

Emitted metric names:

* ``vaultpub.references_total``          -- counter
* ``vaultpub.asset_not_found_total``     -- counter
* ``vaultpub.upload_success_total``      -- counter
* ``vaultpub.upload_failure_total``      -- counter
* ``vaultpub.upload_duration_ms``        -- timing
* ``vaultpub.attachments_deleted_total`` -- counter
* ``vaultpub.http_requests_total``       -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* are optional string key/value pairs; backends translate them
    into their own labelling mechanism.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment the counter *name* by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Metrics backend that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
