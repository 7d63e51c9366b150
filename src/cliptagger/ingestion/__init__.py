"""Video file discovery."""

from .discovery import VIDEO_EXTENSIONS, DirectoryScanner, is_video_file
from .errors import ScanError
from .models import ScannedFile

__all__ = ["DirectoryScanner", "ScannedFile", "ScanError", "VIDEO_EXTENSIONS", "is_video_file"]
