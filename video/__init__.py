"""
Video module - frame acquisition from video files and image directories
"""

from .frame_loader import FrameLoader

__all__ = ['FrameLoader']
