from .bundle import aggregate, format_record, write_bundle
from .errors import (
    ContextBundleError,
    EnumerationError,
    InputFolderError,
    ReadError,
    RootNotFoundError,
    WriteError,
)
from .filters import classify, drop_lock_files, drop_non_text, filter_paths, is_lock_file, is_textual
from .repo import git_ls_files, git_toplevel, list_files, locate_root, marker_toplevel, walk_files

__version__ = "0.1.0"
