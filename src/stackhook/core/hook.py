"""
Logging hook that relays records to Google Cloud Logging.

The hook translates each record into a Cloud Logging entry and hands it to
a remote logger, either through the client's buffered queue (the default)
or with a blocking write:

- Fields named in the label set become entry labels (stringified)
- Every other field is copied verbatim into the JSON payload
- Levels map DEBUG/INFO/WARNING/ERROR one to one, FATAL to CRITICAL,
  PANIC to ALERT and anything unknown to DEBUG

Example::

    from google.cloud import logging as gcloud_logging

    client = CloudLoggingClient(client=gcloud_logging.Client(project="my-project"))
    hook = new(client, "my-log")
    logging.getLogger().addHandler(hook)
    logging.getLogger(__name__).info(
        "A walrus appears", extra={"animal": "walrus", "number": 1, "size": 10}
    )
    client.close()  # the asynchronous path is buffered; close flushes it
"""

import logging
from typing import Any, Dict, FrozenSet, List, Mapping, MutableMapping

import structlog

from ..models.entry import Record, RemoteEntry
from .context import SyncContext
from .levels import Level, all_levels, map_level

logger = structlog.get_logger(__name__, logger=__name__)

# Own diagnostics carry their module name under the "logger" key.
_PACKAGE = __name__.split(".")[0]


class StackdriverHook(logging.Handler):
    """
    Relays log records to a Cloud Logging destination.

    ``client`` is anything with ``logger(name, **options)`` returning a
    remote logger that offers ``log(entry)`` (buffered, non-blocking) and
    ``log_sync(entry, ctx)`` (blocking). ``CloudLoggingClient`` is the
    google-cloud-logging implementation.

    The hook owns its logger handle but never flushes or closes the client;
    that stays with the application. Configure labels and the sync context
    before traffic starts: the hook takes no locks.
    """

    def __init__(self, client: Any, log_name: str, *, synchronous: bool = False, **options: Any) -> None:
        super().__init__(level=logging.NOTSET)
        self.client = client
        self.log_name = log_name
        self.remote_logger = client.logger(log_name, **options)
        self._labels: FrozenSet[str] = frozenset()
        self._sync_context = SyncContext.background()
        self._synchronous = synchronous

        logger.debug(
            "Stackdriver hook initialized",
            log_name=log_name,
            synchronous=synchronous,
            options=sorted(options),
        )

    @property
    def synchronous(self) -> bool:
        return self._synchronous

    @property
    def labels(self) -> FrozenSet[str]:
        return self._labels

    @property
    def sync_context(self) -> SyncContext:
        return self._sync_context

    def set_sync_context(self, ctx: SyncContext) -> None:
        """Use ``ctx`` for subsequent synchronous deliveries."""
        self._sync_context = ctx

    def set_labels(self, *names: str) -> None:
        """Replace the set of field names promoted to labels. No names clears it."""
        self._labels = frozenset(names)
        logger.debug("Hook labels updated", log_name=self.log_name, labels=sorted(self._labels))

    def levels(self) -> List[Level]:
        """Levels this hook fires on: all of them."""
        return all_levels()

    def build_entry(self, record: Record) -> RemoteEntry:
        """Split a record's fields into payload and labels and map its level."""
        label_names = self._labels
        payload: Dict[str, Any] = {"message": record.message}
        labels: Dict[str, str] = {}

        for key, value in record.data.items():
            if key in label_names:
                labels[key] = value if isinstance(value, str) else str(value)
            else:
                payload[key] = value

        return RemoteEntry(
            timestamp=record.time,
            severity=map_level(record.level),
            payload=payload,
            labels=labels,
        )

    def fire(self, record: Record) -> None:
        """
        Send ``record`` to Cloud Logging.

        Synchronous hooks block until the API answers and re-raise any
        failure untouched. Asynchronous hooks enqueue and return; delivery
        errors are reported by the client's background worker instead.
        """
        entry = self.build_entry(record)

        if self._synchronous:
            self.remote_logger.log_sync(entry, self._sync_context)
            return
        self.remote_logger.log(entry)

    def emit(self, record: logging.LogRecord) -> None:
        """stdlib ``logging.Handler`` entry point."""
        try:
            self.fire(Record.from_logging(record))
        except Exception:
            self.handleError(record)

    def __call__(
        self, _logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> Mapping[str, Any]:
        """
        structlog processor entry point; the event dict passes through unchanged.

        Events from stackhook's own loggers are rendered locally but never
        fired, so diagnostics about the hook and client do not loop back
        into Cloud Logging.
        """
        if not _is_own_event(event_dict):
            self.fire(Record.from_event_dict(method_name, event_dict))
        return event_dict

    def __repr__(self) -> str:
        mode = "sync" if self._synchronous else "async"
        return f"<{type(self).__name__} {self.log_name} ({mode})>"


def new(client: Any, log_name: str, **options: Any) -> StackdriverHook:
    """
    Return a hook that relays records asynchronously.

    Entries are buffered by the client: the application must flush or close
    the client before exiting or buffered entries are lost.
    """
    return StackdriverHook(client, log_name, synchronous=False, **options)


def new_synchronous(client: Any, log_name: str, **options: Any) -> StackdriverHook:
    """
    Return a hook that writes each record synchronously.

    Not recommended for typical use: every log call waits for a round trip
    to the Cloud Logging API. Call ``set_sync_context`` on the returned hook
    to bound those calls with a deadline.
    """
    return StackdriverHook(client, log_name, synchronous=True, **options)


def _is_own_event(event_dict: Mapping[str, Any]) -> bool:
    name = event_dict.get("logger")
    return isinstance(name, str) and (name == _PACKAGE or name.startswith(_PACKAGE + "."))
