from .diff import diff_versions
from .update_log import UpdateBatch, append_update_batch, read_update_log
from .versions import VersionLoad, load_versions, save_versions

__all__ = [
    "diff_versions",
    "UpdateBatch",
    "append_update_batch",
    "read_update_log",
    "VersionLoad",
    "load_versions",
    "save_versions",
]
