from .manifest import Bundle, Item, Manifest, build_manifest, load_manifest, save_manifest
from .registry import BundleRegistry

__all__ = ["Bundle", "Item", "Manifest", "BundleRegistry", "build_manifest", "load_manifest", "save_manifest"]
