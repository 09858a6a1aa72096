from .base import BundlePacker, PackResult
from .zip_packer import ZipBundlePacker

__all__ = ["BundlePacker", "PackResult", "ZipBundlePacker"]
