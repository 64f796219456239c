from lendaria.infrastructure.database.record_store import (
    JOBS,
    NOT_CONFIGURED_MESSAGE,
    PROFILES,
    TALENTS,
    RecordStore,
    StoreError,
    StoreResult,
    SupabaseRecordStore,
    UnconfiguredRecordStore,
    create_record_store,
)

__all__ = [
    "JOBS",
    "NOT_CONFIGURED_MESSAGE",
    "PROFILES",
    "TALENTS",
    "RecordStore",
    "StoreError",
    "StoreResult",
    "SupabaseRecordStore",
    "UnconfiguredRecordStore",
    "create_record_store",
]
