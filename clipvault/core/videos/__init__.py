"""
Video upload brokering and metadata recording.
"""

from .broker import UrlBroker, UrlSigner
from .models import (
    DownloadGrant,
    NewVideo,
    UploadGrant,
    VideoRecord,
    build_storage_key,
)
from .recorder import MetadataRecorder, VideoStore

__all__ = [
    "DownloadGrant",
    "MetadataRecorder",
    "NewVideo",
    "UploadGrant",
    "UrlBroker",
    "UrlSigner",
    "VideoRecord",
    "VideoStore",
    "build_storage_key",
]
