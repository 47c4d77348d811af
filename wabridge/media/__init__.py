from .media_extractor import MediaExtractor, build_media_path, derive_extension

__all__ = ["MediaExtractor", "build_media_path", "derive_extension"]
