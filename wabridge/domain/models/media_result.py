"""
Media result models.

ExtractedMedia is the descriptor returned after an attachment has been
downloaded and written under the media root. Once written, the file at
``media_path`` is never modified.
"""

from pydantic import BaseModel, ConfigDict, Field


class ExtractedMedia(BaseModel):
    """Result of a media extraction.

    An empty instance (all fields blank) means there was no attachment to
    extract, which is the normal case for text-only messages.
    """

    model_config = ConfigDict(frozen=True)

    media_path: str = Field("", description="Path of the written file")
    mime_type: str = Field("", description="MIME type reported by the sender")
    caption: str = Field("", description="Caption for image, video and document")

    @property
    def is_empty(self) -> bool:
        return not self.media_path
