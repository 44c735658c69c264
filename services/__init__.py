"""
Services layer for the Manufacturer Pack application.

This module contains the stateful workflow around the pure pack core:
- ReadinessService: lazy initialization and updates of readiness records
- PackAssembler: renders the selected documents into one ZIP archive
- VersionTracker: pack version and dispatch state on the readiness record
- PackService: validate, assemble, record, upload, audit
- InMemoryReadinessStore / RecordCache: persistence collaborator and its cache

Requests for the same purchase order must be serialized by the caller; the
services take no per-order locks.
"""

from .pack_assembler import PackAssembler
from .pack_service import PackOutcome, PackService
from .readiness_service import ReadinessService
from .record_cache import RecordCache
from .stores import InMemoryReadinessStore
from .version_tracker import VersionTracker

__all__ = [
    "PackAssembler",
    "PackOutcome",
    "PackService",
    "ReadinessService",
    "RecordCache",
    "InMemoryReadinessStore",
    "VersionTracker",
]
