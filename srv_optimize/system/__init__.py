"""
System module - thin wrappers over host utilities and config files.

Components:
- CommandRunner: Runs external commands, logs their output
- Sysctl / SysctlFile: Live kernel parameters and sysctl.conf
- FstabFile: Structured mount table edits
- DependencyInstaller: apt/dpkg package checks
"""

from .command import CommandRunner
from .sysctl import Sysctl, SysctlFile
from .fstab import FstabFile, FstabEntry
from .installer import DependencyInstaller

__all__ = [
    "CommandRunner",
    "Sysctl",
    "SysctlFile",
    "FstabFile",
    "FstabEntry",
    "DependencyInstaller",
]
