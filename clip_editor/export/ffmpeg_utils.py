"""
FFmpeg Utilities

Binary discovery and command construction for the export backend.
FFmpeg is always run as a subprocess; nothing is linked in.
"""

import os
import shutil
from typing import List

from clip_editor.models.export_request import ExportRequest


def get_ffmpeg_path() -> str:
    """
    Finds the FFmpeg binary path.

    Lookup order: CLIPCROP_FFMPEG, the working directory (bundled with
    the app), the system PATH, then the binary shipped with imageio-ffmpeg.

    Raises:
        FileNotFoundError: If no FFmpeg binary can be found
    """
    configured = os.getenv("CLIPCROP_FFMPEG")
    if configured and os.path.exists(configured):
        return configured

    # Check local directory (bundled with app)
    local_ffmpeg = os.path.join(os.getcwd(), "ffmpeg.exe" if os.name == "nt" else "ffmpeg")
    if os.path.exists(local_ffmpeg):
        return local_ffmpeg

    # Check system PATH
    system_ffmpeg = shutil.which("ffmpeg")
    if system_ffmpeg:
        return system_ffmpeg

    try:
        import imageio_ffmpeg
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError:
        # imageio-ffmpeg has no binary for this platform
        pass

    raise FileNotFoundError(
        "FFmpeg not found. Please install FFmpeg or place it in the application directory."
    )


def format_crop_filter(request: ExportRequest) -> str:
    """FFmpeg crop filter: crop=width:height:x:y."""
    crop = request.crop
    return f"crop={crop.width}:{crop.height}:{crop.x}:{crop.y}"


def build_ffmpeg_args(request: ExportRequest) -> List[str]:
    """
    Arguments (without the binary) that cut and crop the input.

    The audio stream is copied untouched; the output is overwritten.
    """
    return [
        "-i", request.input_path,
        "-ss", str(request.selection.start),
        "-to", str(request.selection.end),
        "-filter:v", format_crop_filter(request),
        "-c:a", "copy",
        "-y",
        request.output_path
    ]
