"""
Export Module

Runs FFmpeg on an ExportRequest and relays its output.
The editor only needs to know when the process is over; progress lines
are forwarded verbatim for the status log.
"""

import os
import subprocess
from typing import Optional

from PySide6.QtCore import QObject, Signal, QThread

from clip_editor.config import logger
from clip_editor.export.ffmpeg_utils import get_ffmpeg_path, build_ffmpeg_args
from clip_editor.models.export_request import ExportRequest


class ExportWorker(QThread):
    """
    Worker thread for video export.

    Runs the FFmpeg process in a separate thread to keep
    the UI responsive during export. Exactly one of completed / failed
    is emitted per run.

    Signals:
        progress: A new FFmpeg status line
        completed: Export succeeded (message)
        failed: Export failed (error message)
    """

    progress = Signal(str)
    completed = Signal(str)
    failed = Signal(str)

    def __init__(self, request: ExportRequest, parent=None):
        super().__init__(parent)

        self.request = request

        self._cancelled = False
        self._process: Optional[subprocess.Popen] = None

    def run(self) -> None:
        """Execute the export process."""
        try:
            cmd = [get_ffmpeg_path()] + build_ffmpeg_args(self.request)
            logger.info(f"Running FFmpeg: {' '.join(cmd)}")

            try:
                self._process = subprocess.Popen(
                    cmd,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    universal_newlines=True,
                    creationflags=subprocess.CREATE_NO_WINDOW if os.name == "nt" else 0
                )
            except OSError as e:
                self.failed.emit(f"Failed to start FFmpeg command: {e}")
                return

            # FFmpeg writes its statistics to stderr
            last_line = None
            for raw_line in self._process.stderr:
                if self._cancelled:
                    break
                line = raw_line.strip()
                if not line or line == last_line:
                    continue
                last_line = line
                self.progress.emit(line)

            return_code = self._process.wait()

            if self._cancelled:
                self.failed.emit("Export cancelled")
            elif return_code == 0:
                self.completed.emit("Successfully processed video")
            else:
                self.failed.emit(f"FFmpeg exited with error code: {return_code}")

        except Exception as e:
            logger.error(f"Export failed: {e}")
            self.failed.emit(str(e))

    def cancel(self) -> None:
        """Cancel the export process."""
        self._cancelled = True
        if self._process and self._process.poll() is None:
            self._process.terminate()


class Exporter(QObject):
    """
    High-level export interface.

    Usage:
        exporter = Exporter()
        exporter.progress.connect(session.on_export_progress)
        exporter.finished.connect(session.on_export_finished)
        exporter.failed.connect(session.on_export_failed)
        exporter.export(request)

    Signals:
        progress: FFmpeg status line
        finished: Export complete (message)
        failed: Export failed (error message)
    """

    progress = Signal(str)
    finished = Signal(str)
    failed = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)

        self._worker: Optional[ExportWorker] = None

    def export(self, request: ExportRequest) -> bool:
        """
        Start the export process.

        Returns:
            False if an export is already running
        """
        if self.is_exporting():
            return False

        self._worker = ExportWorker(request, self)
        self._worker.progress.connect(self.progress)
        self._worker.completed.connect(self.finished)
        self._worker.failed.connect(self.failed)
        self._worker.start()
        return True

    def cancel(self, wait: bool = False) -> None:
        """
        Cancel the current export.

        Args:
            wait: Block until the worker thread has exited
        """
        if self._worker:
            self._worker.cancel()
            if wait:
                self._worker.wait()

    def is_exporting(self) -> bool:
        """Check if an export is in progress."""
        return self._worker is not None and self._worker.isRunning()
