"""Service classes for business logic."""

from sitecms.services import media_usage
from sitecms.services.asset_store import AssetStore
from sitecms.services.batch_changes import BatchChangePipeline, BatchResult
from sitecms.services.media_usage import MediaService, MediaUsageIndex
from sitecms.services.publishing import PublishingService
from sitecms.services.seeding import SeedingService, SeedReport

__all__ = [
    "AssetStore",
    "BatchChangePipeline",
    "BatchResult",
    "MediaService",
    "MediaUsageIndex",
    "PublishingService",
    "SeedReport",
    "SeedingService",
    "media_usage",
]
