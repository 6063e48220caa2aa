"""
Mock components for testing srv_optimize.

FakeHost replaces CommandRunner so tuning, validation and installs can be
exercised without root or real utilities.
"""

from .fake_host import FakeHost, DEFAULT_SYSCTL

__all__ = [
    'FakeHost',
    'DEFAULT_SYSCTL',
]
