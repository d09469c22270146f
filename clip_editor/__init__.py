"""
ClipCrop

Visually crop and trim a video, then export the result with FFmpeg.

Usage:
    python -m clip_editor.app

Or, once installed:
    clipcrop
"""

from clip_editor.config import VERSION as __version__

__author__ = "ClipCrop Team"
