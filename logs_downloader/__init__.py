"""
Logs Downloader - resumable, checkpointed log batch downloader.

Architecture:
- core/: Stable foundation (partitioning, HTTP client, storage, checkpoint)
- config/: Option layering and startup validation
- downloader: Sequential driver over sub-intervals
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
