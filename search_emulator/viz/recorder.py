import logging
import os
from datetime import datetime

import cv2
import numpy as np
import pygame

logger = logging.getLogger(__name__)


def default_output_file(prefix="search", directory="recordings"):
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    name = f"{prefix}_{stamp}.mp4"
    return os.path.join(directory, name) if os.path.isdir(directory) else name


class VideoRecorder:
    """
    Writes pygame frames to an mp4 file. Inactive recorders ignore every call.

    The window redraws at 60 fps while a slow search may take minutes, so
    only every `frame_step`-th captured frame is written.
    """
    def __init__(self, active=False, output_file=None, fps=30, frame_step=2):
        self.active = active
        self.output_file = output_file or (default_output_file() if active else None)
        self.fps = fps
        self.frame_step = max(1, frame_step)

        self.writer = None
        self.frame_size = None
        self.frame_count = 0
        self._seen = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    @staticmethod
    def surface_to_frame(surface: pygame.Surface) -> np.ndarray:
        # surfarray is column-major RGB, OpenCV wants row-major BGR
        rgb = np.ascontiguousarray(pygame.surfarray.array3d(surface).swapaxes(0, 1))
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    def _open(self, size):
        self.frame_size = size
        codec = cv2.VideoWriter_fourcc(*'mp4v')
        self.writer = cv2.VideoWriter(self.output_file, codec, self.fps, size)
        logger.info(f"Recording started: {self.output_file} ({size[0]}x{size[1]} @ {self.fps} fps)")

    def capture_frame(self, surface: pygame.Surface):
        if not self.active:
            return

        self._seen += 1
        if (self._seen - 1) % self.frame_step:
            return

        if self.writer is None:
            self._open(surface.get_size())
        self.writer.write(self.surface_to_frame(surface))
        self.frame_count += 1

    def stop(self):
        if self.writer is None:
            return
        self.writer.release()
        self.writer = None
        logger.info(f"Video saved: {self.output_file} ({self.frame_count} frames)")
