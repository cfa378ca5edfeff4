"""
Request pipeline and persisted query installation.

The pipeline holds two ordered filter chains that run around GraphQL
execution:
- request filters: rewrite request data before execution
- status filters: adjust the HTTP status code after execution

`install_persisted_queries` wires a PersistedQueryLoader into a pipeline
once per process, resolving all overrides at install time.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .loader import PersistedQueryLoader
from ..config.settings import StoreCfg
from ..persist.query_store import LoadOverride, QueryStore, RecordQueryStore, SaveOverride
from ..persist.sqlite_store import RecordStore
from ..telemetry import get_logger


logger = get_logger(__name__)

EXTENSION_NAME = "persisted_queries"

RequestFilter = Callable[[Mapping[str, Any]], dict]
StatusFilter = Callable[[int, Any], int]


class GraphQLPipeline:
    """Ordered request-data and status-code filters around GraphQL execution."""

    def __init__(self):
        self._request_filters: List[Tuple[int, RequestFilter]] = []
        self._status_filters: List[Tuple[int, StatusFilter]] = []
        self.extensions: Dict[str, Any] = {}

    @staticmethod
    def _add(chain: list, fn: Callable, priority: int) -> bool:
        if any(existing == fn for _, existing in chain):
            return False
        chain.append((priority, fn))
        # Stable sort keeps registration order within a priority.
        chain.sort(key=lambda item: item[0])
        return True

    def add_request_filter(self, fn: RequestFilter, priority: int = 10) -> bool:
        """Register a request-data filter. Returns False if already registered."""
        return self._add(self._request_filters, fn, priority)

    def add_status_filter(self, fn: StatusFilter, priority: int = 10) -> bool:
        """Register a status-code filter. Returns False if already registered."""
        return self._add(self._status_filters, fn, priority)

    @property
    def request_filters(self) -> List[RequestFilter]:
        return [fn for _, fn in self._request_filters]

    @property
    def status_filters(self) -> List[StatusFilter]:
        return [fn for _, fn in self._status_filters]

    def filter_request_data(self, request_data: Mapping[str, Any]) -> dict:
        """Run request data through every request filter in priority order."""
        data = dict(request_data)
        for fn in self.request_filters:
            data = fn(data)
        return data

    def filter_status_code(self, status_code: int, response: Any) -> int:
        """Run the status code through every status filter in priority order."""
        for fn in self.status_filters:
            status_code = fn(status_code, response)
        return status_code


@dataclass
class PersistedQueryOverrides:
    """
    Integrator hooks for persisted query storage.

    Attributes:
        record_type: Filter for the record type name; empty result disables persistence
        record_type_args: Filter for the record type registration args
        load_query: Loader consulted before the record store
        save_query: Filter for record fields before insert; empty result skips the save
        store: Full QueryStore replacement (e.g. an external key-value cache)
    """

    record_type: Optional[Callable[[str], str]] = None
    record_type_args: Optional[Callable[[dict], dict]] = None
    load_query: Optional[LoadOverride] = None
    save_query: Optional[SaveOverride] = None
    store: Optional[QueryStore] = None


def install_persisted_queries(
    pipeline: GraphQLPipeline,
    records: Optional[RecordStore],
    cfg: Optional[StoreCfg] = None,
    overrides: Optional[PersistedQueryOverrides] = None,
) -> Optional[PersistedQueryLoader]:
    """
    Register the persisted query record type and hook the loader into the
    pipeline.

    Installing twice onto the same pipeline returns the loader that is
    already installed.

    Args:
        pipeline: Pipeline to install the loader filters into
        records: Record store for the default query store
        cfg: Store configuration
        overrides: Integrator hooks

    Returns:
        The installed loader, or None if the record type is misconfigured
    """
    installed = pipeline.extensions.get(EXTENSION_NAME)
    if installed is not None:
        return installed

    cfg = cfg or StoreCfg()
    overrides = overrides or PersistedQueryOverrides()

    record_type = cfg.record_type
    if overrides.record_type is not None:
        record_type = overrides.record_type(record_type)

    # If the record type doesn't look right, don't hook.
    if not record_type:
        logger.warning("persisted_queries_disabled", reason="empty_record_type")
        return None

    if records is not None and records.type_exists(record_type):
        logger.warning(
            "persisted_queries_disabled",
            reason="record_type_exists",
            record_type=record_type,
        )
        return None

    if overrides.store is not None:
        store = overrides.store
    elif records is not None:
        store = RecordQueryStore(
            records,
            record_type,
            load_override=overrides.load_query,
            save_override=overrides.save_query,
        )
    else:
        raise ValueError("Persisted queries need a RecordStore or a store override")

    if records is not None:
        args = dict(cfg.record_type_args)
        if overrides.record_type_args is not None:
            args = overrides.record_type_args(args)
        records.register_type(record_type, args)

    loader = PersistedQueryLoader(store)
    pipeline.add_request_filter(loader.process_request_data)
    pipeline.add_status_filter(loader.get_http_status_code)
    pipeline.extensions[EXTENSION_NAME] = loader

    logger.info(
        "persisted_queries_installed",
        record_type=record_type,
        store=type(store).__name__,
    )
    return loader
