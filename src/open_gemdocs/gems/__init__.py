"""Package manager access — installed gem listing and metadata."""

from open_gemdocs.gems.models import GemSpec, InstalledGem
from open_gemdocs.gems.provider import PackageManager
from open_gemdocs.gems.rubygems import RubyGems

__all__ = [
    "GemSpec",
    "InstalledGem",
    "PackageManager",
    "RubyGems",
]
