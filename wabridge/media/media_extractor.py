"""
Media extraction for incoming attachments.

Downloads an attachment through the protocol client, derives a file extension
from its mime type and writes the bytes under a storage root with owner-only
permissions.
"""

import asyncio
import mimetypes
import os
import time
import uuid
from pathlib import Path

from wabridge.core.logging.logger import get_logger
from wabridge.domain.errors import MediaDownloadError, MediaTooLargeError, MediaWriteError
from wabridge.domain.interfaces.messaging_interface import IMessagingClient
from wabridge.domain.models.media_result import ExtractedMedia
from wabridge.events.message_content import MediaReference

MEDIA_FILE_MODE = 0o600


def derive_extension(mime_type: str) -> str:
    """
    Get a file extension for a mime type.

    Uses the standard mime table first. Unknown types fall back to the part
    after the last ``/`` so ``application/x-custom`` becomes ``.x-custom``.

    Returns:
        Extension with leading dot, or empty string for an empty mime type
    """
    base_type = mime_type.split(";", 1)[0].strip().lower()
    if not base_type:
        return ""

    extension = mimetypes.guess_extension(base_type)
    if extension:
        return extension

    if "/" in base_type:
        subtype = base_type.rsplit("/", 1)[-1]
        if subtype:
            return f".{subtype}"
    return ""


def build_media_path(storage_root: str | Path, extension: str) -> Path:
    """Fresh ``{root}/{unix seconds}-{uuid4}{ext}`` path."""
    return Path(storage_root) / f"{int(time.time())}-{uuid.uuid4()}{extension}"


def write_private_file(path: Path, data: bytes) -> None:
    """Write bytes readable and writable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, MEDIA_FILE_MODE)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def store_media_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    write_private_file(path, data)


class MediaExtractor:
    """
    Turns media references into files on disk.

    Each reference is consumed once; the returned ExtractedMedia is the only
    trace of it the rest of the pipeline sees.
    """

    def __init__(self, client: IMessagingClient, max_download_size: int | None = None):
        """
        Args:
            client: Protocol client used for the download command
            max_download_size: Reject attachments larger than this many bytes
        """
        self.client = client
        self.max_download_size = max_download_size
        self.logger = get_logger(__name__)

    async def extract(
        self, storage_root: str | Path, media: MediaReference | None
    ) -> ExtractedMedia:
        """
        Download and persist one attachment.

        Args:
            storage_root: Directory the file is written into
            media: Attachment reference, or None for text-only messages

        Returns:
            ExtractedMedia; empty when media is None

        Raises:
            MediaDownloadError: Download failed or returned too much data
            MediaWriteError: File could not be written
        """
        if media is None:
            self.logger.debug("Skip download because media is empty")
            return ExtractedMedia()

        kind = media.media_kind.value
        try:
            data = await self.client.download(media)
        except Exception as e:
            raise MediaDownloadError(f"Failed to download {kind}: {e}") from e

        if self.max_download_size is not None and len(data) > self.max_download_size:
            raise MediaTooLargeError(len(data), self.max_download_size)

        mime_type = media.get_mimetype()
        path = build_media_path(storage_root, derive_extension(mime_type))
        try:
            await asyncio.to_thread(store_media_file, path, data)
        except OSError as e:
            raise MediaWriteError(str(path), str(e)) from e

        self.logger.info(f"{kind.capitalize()} downloaded to {path} ({len(data)} bytes)")
        return ExtractedMedia(
            media_path=str(path),
            mime_type=mime_type,
            caption=media.get_caption(),
        )
