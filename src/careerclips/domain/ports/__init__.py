from .clip_repository import ClipRepository
from .link_prober import LinkProberPort
from .record_store import RecordStorePort
from .revalidation import RevalidationSchedulerPort

__all__ = [
    "ClipRepository",
    "LinkProberPort",
    "RecordStorePort",
    "RevalidationSchedulerPort",
]
