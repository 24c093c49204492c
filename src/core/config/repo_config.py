"""
Repository configuration.
"""

from dataclasses import dataclass


@dataclass
class RepoConfig:
    """Location of the per-repository policy file."""

    settings_file: str = ".github/ahk-monitor.yml"
