"""Adapters — host bindings for commands and downloads.

Public re-exports for convenient access.
"""

from asl3_mapp.adapters.base import CommandResult, Fetcher, Runner
from asl3_mapp.adapters.mock import MockCommandRunner, MockDownloader
from asl3_mapp.adapters.network.download import Downloader
from asl3_mapp.adapters.shell.command import CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Downloader",
    "Fetcher",
    "MockCommandRunner",
    "MockDownloader",
    "Runner",
]
