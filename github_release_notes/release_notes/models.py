"""Data models for release notes drafting."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.constants import DRAFT_SCHEMA_VERSION
from ..utils.helpers import ensure_aware, first_line, generate_item_id

ItemType = Literal["pr", "issue", "commit"]
"""Discriminator values of the release item union."""


class WorkspaceStep(str, Enum):
    """Step of the release notes workspace the user is on."""

    CONFIG = "config"
    REVIEW = "review"
    SUMMARY = "summary"


class CamelModel(BaseModel):
    """Base for documents persisted or exported with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# GitHub payloads
# ---------------
# These mirror the GitHub REST JSON (snake_case) and keep only the fields the
# workspace reads. Unknown keys are ignored.


class GitHubUser(BaseModel):
    """Pydantic model for a GitHub user reference."""

    login: str = ""
    avatar_url: str | None = None


class LabelPayload(BaseModel):
    """Pydantic model for a GitHub label."""

    id: int | None = None
    name: str
    color: str | None = None
    description: str | None = None


class MilestonePayload(BaseModel):
    """Pydantic model for a GitHub milestone."""

    id: int
    number: int
    title: str = ""
    description: str | None = None
    state: str = "open"
    open_issues: int = 0
    closed_issues: int = 0
    due_on: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PullRequestPayload(BaseModel):
    """Pydantic model for a pull request as returned by the pulls listing."""

    id: int | None = None
    number: int
    title: str
    body: str | None = None
    state: str = "closed"
    html_url: str = ""
    user: GitHubUser | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    labels: list[LabelPayload] = Field(default_factory=list)

    @property
    def author_login(self) -> str:
        """Login of the pull request author."""
        return self.user.login if self.user else ""

    @property
    def label_names(self) -> list[str]:
        """Names of the labels applied to the pull request."""
        return [label.name for label in self.labels]


class IssuePayload(BaseModel):
    """Pydantic model for an issue as returned by the issues listing."""

    id: int | None = None
    number: int
    title: str
    body: str | None = None
    state: str = "closed"
    html_url: str = ""
    user: GitHubUser | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    labels: list[LabelPayload] = Field(default_factory=list)
    milestone: MilestonePayload | None = None
    pull_request: dict[str, Any] | None = None

    @property
    def is_pull_request(self) -> bool:
        """Whether the issues listing returned this entry for a pull request."""
        return self.pull_request is not None

    @property
    def author_login(self) -> str:
        """Login of the issue author."""
        return self.user.login if self.user else ""

    @property
    def label_names(self) -> list[str]:
        """Names of the labels applied to the issue."""
        return [label.name for label in self.labels]


class CommitAuthor(BaseModel):
    """Git author information embedded in a commit."""

    name: str = ""
    email: str = ""
    date: datetime | None = None


class CommitDetails(BaseModel):
    """The git-level part of a commit listing entry."""

    author: CommitAuthor | None = None
    message: str = ""


class CommitPayload(BaseModel):
    """Pydantic model for a commit as returned by the commits or compare endpoints."""

    sha: str
    html_url: str = ""
    commit: CommitDetails = Field(default_factory=CommitDetails)
    author: GitHubUser | None = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return first_line(self.commit.message)

    @property
    def author_name(self) -> str:
        """GitHub login of the author, falling back to the git author name."""
        if self.author and self.author.login:
            return self.author.login
        return self.commit.author.name if self.commit.author else ""


class RepositoryInfo(BaseModel):
    """Repository metadata shown in the workspace and used for exports."""

    owner: str
    name: str
    full_name: str = ""
    html_url: str = ""
    description: str | None = None
    private: bool = False
    default_branch: str = "main"
    stargazers_count: int = 0
    language: str | None = None

    @classmethod
    def from_github(cls, data: dict[str, Any]) -> Self:
        """Build repository metadata from the GitHub repository JSON."""
        return cls(
            owner=data["owner"]["login"],
            name=data["name"],
            full_name=data.get("full_name") or f"{data['owner']['login']}/{data['name']}",
            html_url=data.get("html_url", ""),
            description=data.get("description"),
            private=data.get("private", False),
            default_branch=data.get("default_branch") or "main",
            stargazers_count=data.get("stargazers_count") or 0,
            language=data.get("language"),
        )


# Filters
# -------


class MilestoneFilter(CamelModel):
    """Bound the release by a milestone."""

    type: Literal["milestone"] = "milestone"
    milestone: MilestonePayload | None = None

    def is_usable(self) -> bool:
        """A milestone filter needs a selected milestone."""
        return self.milestone is not None


class TagFilter(CamelModel):
    """Bound the release by a tag pair; no end tag means "up to latest"."""

    type: Literal["tag"] = "tag"
    from_tag: str = ""
    to_tag: str | None = None

    def is_usable(self) -> bool:
        """A tag filter needs a start tag."""
        return bool(self.from_tag.strip())


class DateFilter(CamelModel):
    """Bound the release by a date pair; no end date means "up to now"."""

    type: Literal["date"] = "date"
    from_date: datetime | None = None
    to_date: datetime | None = None

    def is_usable(self) -> bool:
        """A date filter needs a start date."""
        return self.from_date is not None


class BranchFilter(CamelModel):
    """Bound the release by the commits of one branch ahead of another."""

    type: Literal["branch"] = "branch"
    base_branch: str = ""
    compare_branch: str = ""

    def is_usable(self) -> bool:
        """A branch filter needs both branches."""
        return bool(self.base_branch.strip() and self.compare_branch.strip())


ReleaseFilter = Annotated[MilestoneFilter | TagFilter | DateFilter | BranchFilter, Field(discriminator="type")]


# Resolved ranges
# ---------------


class DateWindow(BaseModel):
    """Inclusive time window; a missing bound means "no bound"."""

    since: datetime | None = None
    until: datetime | None = None

    @field_validator("since", "until")
    @classmethod
    def make_aware(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @property
    def is_unbounded(self) -> bool:
        """True when neither bound is set."""
        return self.since is None and self.until is None

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        moment = ensure_aware(moment)
        if self.since is not None and moment < self.since:
            return False
        if self.until is not None and moment > self.until:
            return False
        return True

    def is_before_start(self, moment: datetime) -> bool:
        """Check whether a timestamp is older than the window start."""
        return self.since is not None and ensure_aware(moment) < self.since


class CompareRef(BaseModel):
    """Two refs handed to the compare endpoint."""

    base: str
    head: str


class ResolvedRange(BaseModel):
    """Concrete bounds derived from a release filter."""

    window: DateWindow = Field(default_factory=DateWindow)
    compare: CompareRef | None = None


# Release items
# -------------


class PullRequestItem(CamelModel):
    """A merged pull request considered for the release."""

    type: Literal["pr"] = "pr"
    id: str
    payload: PullRequestPayload
    included: bool = True
    note: str = ""

    @classmethod
    def from_payload(cls, payload: PullRequestPayload) -> Self:
        """Wrap a pull request with its deterministic ID and default inclusion."""
        return cls(id=generate_item_id("pr", payload.number), payload=payload)


class IssueItem(CamelModel):
    """A closed issue considered for the release."""

    type: Literal["issue"] = "issue"
    id: str
    payload: IssuePayload
    included: bool = True
    note: str = ""

    @classmethod
    def from_payload(cls, payload: IssuePayload) -> Self:
        """Wrap an issue with its deterministic ID and default inclusion."""
        return cls(id=generate_item_id("issue", payload.number), payload=payload)


class CommitItem(CamelModel):
    """A commit considered for the release. Excluded by default."""

    type: Literal["commit"] = "commit"
    id: str
    payload: CommitPayload
    included: bool = False
    note: str = ""

    @classmethod
    def from_payload(cls, payload: CommitPayload) -> Self:
        """Wrap a commit with its deterministic ID and default inclusion."""
        return cls(id=generate_item_id("commit", payload.sha), payload=payload)


ReleaseItem = Annotated[PullRequestItem | IssueItem | CommitItem, Field(discriminator="type")]


# Drafts
# ------


class ReleaseDraft(CamelModel):
    """Persisted working state of one release notes effort for one repository."""

    schema_version: int = DRAFT_SCHEMA_VERSION
    id: str
    owner: str
    repo: str
    version: str = ""
    title: str = ""
    description: str = ""
    filter: ReleaseFilter | None = None
    items: list[ReleaseItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    def find_item(self, item_id: str) -> PullRequestItem | IssueItem | CommitItem | None:
        """Return the item with the given ID, if present."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def belongs_to(self, owner: str, repo: str) -> bool:
        """Check whether the draft belongs to the given repository."""
        return self.owner == owner and self.repo == repo


# Exports
# -------


class ExportRepository(CamelModel):
    """Repository context of an export."""

    owner: str
    name: str
    url: str


class ExportedPullRequest(CamelModel):
    """Flattened pull request entry of an export."""

    number: int
    title: str
    url: str
    author: str
    note: str
    labels: list[str] = Field(default_factory=list)


class ExportedIssue(CamelModel):
    """Flattened issue entry of an export."""

    number: int
    title: str
    url: str
    author: str
    note: str
    labels: list[str] = Field(default_factory=list)


class ExportedCommit(CamelModel):
    """Flattened commit entry of an export."""

    sha: str
    message: str
    url: str
    author: str
    note: str


class ReleaseExport(CamelModel):
    """Read-only projection of a draft into release notes categories."""

    version: str
    title: str
    description: str
    date: datetime
    repository: ExportRepository
    filter: ReleaseFilter | None = None
    pull_requests: list[ExportedPullRequest] = Field(default_factory=list)
    issues: list[ExportedIssue] = Field(default_factory=list)
    commits: list[ExportedCommit] = Field(default_factory=list)
    summary: str = ""
