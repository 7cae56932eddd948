"""Release notes drafting module."""

from .aggregator import ItemAggregator
from .drafts import DraftStore
from .exceptions import FilterNotUsableError, ReleaseItemsFetchError, WorkspaceNotOpenError
from .export import export_filename, render, to_export, to_json, to_markdown
from .markdown import MarkdownWriter
from .models import (
    BranchFilter,
    CommitItem,
    DateFilter,
    IssueItem,
    MilestoneFilter,
    PullRequestItem,
    ReleaseDraft,
    ReleaseExport,
    ReleaseFilter,
    ReleaseItem,
    TagFilter,
    WorkspaceStep,
)
from .resolver import RangeResolver
from .workspace import WorkspaceController

__all__ = [
    "BranchFilter",
    "CommitItem",
    "DateFilter",
    "DraftStore",
    "FilterNotUsableError",
    "IssueItem",
    "ItemAggregator",
    "MarkdownWriter",
    "MilestoneFilter",
    "PullRequestItem",
    "RangeResolver",
    "ReleaseDraft",
    "ReleaseExport",
    "ReleaseFilter",
    "ReleaseItem",
    "ReleaseItemsFetchError",
    "TagFilter",
    "WorkspaceController",
    "WorkspaceNotOpenError",
    "WorkspaceStep",
    "export_filename",
    "render",
    "to_export",
    "to_json",
    "to_markdown",
]
