"""
Remote logging client backed by google-cloud-logging.

Exposes the two delivery operations the hook needs:
- log(): non-blocking enqueue on the library's background-thread transport
- log_sync(): blocking write through Logger.log_struct

Buffering, batching and retries are left entirely to google-cloud-logging.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import structlog
from google.cloud import logging as gcloud_logging
from google.cloud.logging.handlers.transports import BackgroundThreadTransport

from ..models.entry import RemoteEntry
from .context import SyncContext

logger = structlog.get_logger(__name__, logger=__name__)


class CloudLogger:
    """
    Handle for one Cloud Logging log.

    ``options`` are passed to ``google.cloud.logging.Client.logger``
    (``labels``, ``resource``). Common labels given there are merged under
    each entry's own labels on both delivery paths.
    """

    def __init__(self, client: Any, log_name: str, **options: Any) -> None:
        self.name = log_name
        self._common_labels: Dict[str, str] = dict(options.get("labels") or {})
        self._resource = options.get("resource")
        self._client = client
        self._logger = client.logger(log_name, **options)
        # Started on first log(); loggers serving synchronous hooks never spawn a worker.
        self._transport: Optional[BackgroundThreadTransport] = None
        self._transport_lock = threading.Lock()

    def _get_transport(self) -> BackgroundThreadTransport:
        if self._transport is None:
            with self._transport_lock:
                if self._transport is None:
                    self._transport = BackgroundThreadTransport(self._client, self.name)
        return self._transport

    def _labels_for(self, entry: RemoteEntry) -> Optional[Dict[str, str]]:
        labels = {**self._common_labels, **entry.labels}
        return labels or None

    def log(self, entry: RemoteEntry) -> None:
        """Queue ``entry`` for background delivery and return immediately."""
        # The transport reads level and time off a LogRecord; both are
        # overridden by the explicit severity and timestamp below.
        record = logging.LogRecord(self.name, logging.NOTSET, "", 0, "", None, None)
        record.created = entry.timestamp.timestamp()

        kwargs: Dict[str, Any] = {
            "severity": entry.severity.value,
            "timestamp": entry.timestamp,
        }
        labels = self._labels_for(entry)
        if labels:
            kwargs["labels"] = labels
        if self._resource is not None:
            kwargs["resource"] = self._resource

        self._get_transport().send(record, entry.payload, **kwargs)

    def log_sync(self, entry: RemoteEntry, ctx: SyncContext) -> None:
        """Write ``entry`` and block until the API answers."""
        ctx.raise_if_done()
        self._logger.log_struct(
            entry.payload,
            severity=entry.severity.value,
            labels=self._labels_for(entry),
            timestamp=entry.timestamp,
        )

    def flush(self) -> None:
        """Block until queued entries have been handed to the API."""
        if self._transport is not None:
            self._transport.flush()


class CloudLoggingClient:
    """
    Owner of a ``google.cloud.logging.Client`` and the loggers made from it.

    Several hooks may share one client. Call ``close()`` (or ``flush()``)
    before the process exits so buffered entries are written.
    """

    def __init__(self, project: Optional[str] = None, *, client: Any = None, **client_options: Any) -> None:
        if client is None:
            client = gcloud_logging.Client(project=project, **client_options)
        self._client = client
        self._loggers: List[CloudLogger] = []

        logger.info("Cloud Logging client initialized", project=getattr(client, "project", project))

    @property
    def client(self) -> Any:
        return self._client

    def logger(self, log_name: str, **options: Any) -> CloudLogger:
        cloud_logger = CloudLogger(self._client, log_name, **options)
        self._loggers.append(cloud_logger)
        return cloud_logger

    def flush(self) -> None:
        for cloud_logger in self._loggers:
            cloud_logger.flush()

    def close(self) -> None:
        logger.info("Closing Cloud Logging client", loggers=len(self._loggers))
        self.flush()
        self._client.close()
