"""dirindex - serve static files with templated directory index pages."""

from dirindex.app import DirectoryIndex
from dirindex.filters import chain, hide_dotfiles
from dirindex.listing import FileEntry, ListingContext, list_directory
from dirindex.protocol import EntryFilter, FileTransfer, MimeDetector, TemplateRenderer
from dirindex.templating import DirectoryTemplates

__all__ = [
    "DirectoryIndex",
    "DirectoryTemplates",
    "EntryFilter",
    "FileEntry",
    "FileTransfer",
    "ListingContext",
    "MimeDetector",
    "TemplateRenderer",
    "chain",
    "hide_dotfiles",
    "list_directory",
]
