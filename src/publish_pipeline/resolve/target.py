from __future__ import annotations

from typing import Dict, Optional

_PLATFORMS: Dict[str, str] = {
    "android": "Android",
    "ios": "iOS",
    "webgl": "WebGL",
    "windows": "Windows",
    "windows64": "Windows",
    "osx": "OSX",
    "osxintel": "OSX",
    "osxintel64": "OSX",
    "osxuniversal": "OSX",
}


def platform_name(target: str) -> Optional[str]:
    """Output folder name for a build target, or None if the target is not supported."""
    key = (target or "").strip().lower().replace("-", "").replace("_", "")
    return _PLATFORMS.get(key)


def supported_targets() -> list[str]:
    return sorted(_PLATFORMS)
