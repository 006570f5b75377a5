"""
Frame Loader - decoded frames from video files or image directories
"""

import cv2
import numpy as np
from pathlib import Path
from typing import List, Tuple, Optional
from tqdm import tqdm


IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff')


class FrameLoader:
    """Loads BGR uint8 frames from a video file or a directory of images"""

    def __init__(self, source_path: str, show_progress: bool = True):
        """
        Initialize frame loader

        Args:
            source_path: Video file or directory of image files
            show_progress: Show a tqdm progress bar while loading

        Raises:
            FileNotFoundError: If the path does not exist
        """
        self.source_path = Path(source_path)
        self.show_progress = show_progress

        if not self.source_path.exists():
            raise FileNotFoundError(f"Frame source not found: {source_path}")

    @property
    def is_image_directory(self) -> bool:
        return self.source_path.is_dir()

    def list_image_files(self) -> List[Path]:
        """Image files of the source directory, sorted by name"""
        return sorted(p for p in self.source_path.iterdir()
                      if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)

    def load_frames(self, max_frames: Optional[int] = None, start_frame: int = 0) -> List[np.ndarray]:
        """
        Load consecutive frames

        Args:
            max_frames: Maximum number of frames to load (all if None)
            start_frame: Index of the first frame (0-based)

        Returns:
            List of frames (H, W, 3), uint8, BGR

        Raises:
            ValueError: If the source cannot be read or yields no frames
        """
        if start_frame < 0:
            raise ValueError(f"start_frame must be >= 0, got {start_frame}")
        if max_frames is not None and max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {max_frames}")

        if self.is_image_directory:
            frames = self._load_image_directory(max_frames, start_frame)
        else:
            frames = self._load_video(max_frames, start_frame)

        if not frames:
            raise ValueError(f"No frames could be loaded from {self.source_path}")

        return frames

    def _load_image_directory(self, max_frames: Optional[int], start_frame: int) -> List[np.ndarray]:
        files = self.list_image_files()[start_frame:]
        if max_frames is not None:
            files = files[:max_frames]

        frames = []
        for path in tqdm(files, desc="Loading frames", disable=not self.show_progress):
            frame = cv2.imread(str(path), cv2.IMREAD_COLOR)
            if frame is None:
                print(f"Warning: Skipping unreadable image {path.name}")
                continue
            frames.append(frame)

        return frames

    def _load_video(self, max_frames: Optional[int], start_frame: int) -> List[np.ndarray]:
        cap = cv2.VideoCapture(str(self.source_path))
        if not cap.isOpened():
            raise ValueError(f"Cannot open video: {self.source_path}")

        try:
            if start_frame > 0:
                cap.set(cv2.CAP_PROP_POS_FRAMES, start_frame)

            total = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
            if total > 0:
                total = max(total - start_frame, 0)
                if max_frames is not None:
                    total = min(total, max_frames)
            else:
                total = max_frames

            frames = []
            with tqdm(total=total, desc="Loading frames", disable=not self.show_progress) as pbar:
                while max_frames is None or len(frames) < max_frames:
                    ret, frame = cap.read()
                    if not ret or frame is None or frame.size == 0:
                        break
                    frames.append(frame)
                    pbar.update(1)

            return frames

        finally:
            cap.release()

    def load_pair(self, index: int = 0) -> Tuple[np.ndarray, np.ndarray]:
        """
        Load frames index and index + 1

        Returns:
            (frame0, frame1)

        Raises:
            ValueError: If fewer than two frames are available from index
        """
        frames = self.load_frames(max_frames=2, start_frame=index)
        if len(frames) < 2:
            raise ValueError(f"Need two frames starting at index {index}, got {len(frames)}")
        return frames[0], frames[1]

    def load_triplet(self, index: int = 0) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Load frames index, index + 1 and index + 2

        The middle frame is the ground truth for interpolating between the
        outer two.

        Returns:
            (frame0, ground_truth, frame1)
        """
        frames = self.load_frames(max_frames=3, start_frame=index)
        if len(frames) < 3:
            raise ValueError(f"Need three frames starting at index {index}, got {len(frames)}")
        return frames[0], frames[1], frames[2]
