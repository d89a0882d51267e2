"""
SDK lifecycle managers.

Two kinds of SDK are supported:
- ArchiveSdk: a prebuilt release archive per host (e.g. the WASI SDK)
- RepositorySdk: a git clone with an embedded installer (e.g. emsdk)
"""

from .base import SdkDescriptor, SdkLifecycleManager
from .archive import ArchiveSdk
from .repository import RepositorySdk
from .command import Command, SdkCommand

__all__ = [
    "SdkDescriptor",
    "SdkLifecycleManager",
    "ArchiveSdk",
    "RepositorySdk",
    "Command",
    "SdkCommand",
]
