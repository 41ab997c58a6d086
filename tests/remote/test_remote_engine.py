"""Tests for the remote draft and review workflow."""

from __future__ import annotations

import base64

import pytest

from tenkai.errors import DraftExistsError, DraftNotFoundError, UpstreamError
from tenkai.github.client import GitHubClient
from tenkai.models.remote import FileChange, FileWriteStatus, SubmissionOutcome
from tenkai.remote.engine import PROOFREAD_FOOTER, RemoteEngine
from tests.conftest import LOGIN, FakeGitHub

REPO = f"{LOGIN}/novel"


@pytest.fixture
def engine(github_client: GitHubClient) -> RemoteEngine:
    return RemoteEngine(github_client)


@pytest.mark.unit
class TestSubmitFiles:
    """Test the Submit Files."""

    async def test_all_files_written(self, engine: RemoteEngine, fake_github: FakeGitHub) -> None:
        fake_github.add_file(REPO, "a.md", "old")
        files = [FileChange(path="a.md", content="new"), FileChange(path="b.md", content="b")]

        result = await engine.submit_files(REPO, None, "提出", files)

        assert result.outcome == SubmissionOutcome.ALL_SUCCEEDED
        assert result.branch == "main"
        assert result.succeeded == ["a.md", "b.md"]
        assert fake_github.read(REPO, "a.md") == "new"
        assert fake_github.read(REPO, "b.md") == "b"

    async def test_stale_hash_is_conflict_and_content_unchanged(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        fake_github.add_file(REPO, "a.md", "theirs")

        result = await engine.submit_files(
            REPO, "main", "提出", [FileChange(path="a.md", content="mine", sha="stale")]
        )

        assert result.outcome == SubmissionOutcome.NONE_SUCCEEDED
        assert result.results[0].status == FileWriteStatus.CONFLICT
        assert result.first_failure is result.results[0]
        assert fake_github.read(REPO, "a.md") == "theirs"

    async def test_stops_at_first_failure(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        fake_github.failing_paths["b.md"] = 500
        files = [
            FileChange(path="a.md", content="a"),
            FileChange(path="b.md", content="b"),
            FileChange(path="c.md", content="c"),
        ]

        result = await engine.submit_files(REPO, "main", "提出", files)

        assert result.outcome == SubmissionOutcome.PARTIAL_SUCCESS
        assert [r.status for r in result.results] == [
            FileWriteStatus.APPLIED,
            FileWriteStatus.FAILED,
            FileWriteStatus.SKIPPED,
        ]
        assert result.failed == ["b.md"]
        assert result.skipped == ["c.md"]
        assert fake_github.read(REPO, "a.md") == "a"
        assert fake_github.read(REPO, "c.md") is None

    async def test_directory_path_stops_submit_with_partial_success(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        fake_github.directories.add((REPO, "原稿"))
        files = [FileChange(path="ok.md", content="ok"), FileChange(path="原稿", content="x")]

        result = await engine.submit_files(REPO, "main", "提出", files)

        assert result.outcome == SubmissionOutcome.PARTIAL_SUCCESS
        assert result.succeeded == ["ok.md"]
        assert result.failed == ["原稿"]
        assert "not a file" in result.results[1].error
        assert fake_github.read(REPO, "ok.md") == "ok"

    async def test_empty_submit_succeeds(self, engine: RemoteEngine) -> None:
        result = await engine.submit_files(REPO, "main", "提出", [])
        assert result.outcome == SubmissionOutcome.ALL_SUCCEEDED
        assert result.results == []

    async def test_missing_repository_fails_every_file(self, engine: RemoteEngine) -> None:
        result = await engine.submit_files(
            f"{LOGIN}/missing", "main", "提出", [FileChange(path="a.md", content="a")]
        )
        assert result.outcome == SubmissionOutcome.NONE_SUCCEEDED
        assert result.results[0].status == FileWriteStatus.FAILED


@pytest.mark.unit
class TestDrafts:
    """Test the Drafts."""

    async def test_create_draft_from_base_tip(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        created = await engine.create_draft(REPO, "第二稿")
        assert created["baseBranch"] == "main"
        assert fake_github.branches[(REPO, "第二稿")] == fake_github.branches[(REPO, "main")]

        names = [d.name for d in await engine.list_drafts(REPO)]
        assert names == ["main", "第二稿"]

    async def test_create_existing_draft_leaves_ref_unchanged(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        fake_github.branches[(REPO, "第二稿")] = "abc123"
        with pytest.raises(DraftExistsError):
            await engine.create_draft(REPO, "第二稿")
        assert fake_github.branches[(REPO, "第二稿")] == "abc123"

    async def test_missing_base_branch(self, engine: RemoteEngine) -> None:
        with pytest.raises(DraftNotFoundError):
            await engine.create_draft(REPO, "第二稿", "develop")

    async def test_switch_draft_echoes(self, engine: RemoteEngine) -> None:
        assert await engine.switch_draft(REPO, "第二稿") == {"repository": REPO, "name": "第二稿"}


@pytest.mark.unit
class TestSubmitForReview:
    """Test the Submit For Review."""

    async def test_revision_request(self, engine: RemoteEngine, fake_github: FakeGitHub) -> None:
        result = await engine.submit_for_review(
            REPO, "第二稿", title="第二稿", description="加筆しました"
        )
        assert result.number == 1
        assert result.warnings == []
        pull = fake_github.pulls[REPO][0]
        assert pull["head"] == "第二稿"
        assert pull["base"] == "main"
        assert pull["body"] == "加筆しました"

    async def test_proofreading_appends_footer_and_reviewers(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        result = await engine.submit_for_review(
            REPO,
            "第二稿",
            title="校正",
            description="本文",
            reviewers=["editor"],
            proofreading=True,
        )
        assert fake_github.pulls[REPO][0]["body"] == "本文" + PROOFREAD_FOOTER
        assert result.reviewers == ["editor"]
        assert result.warnings == []

    async def test_reviewer_failure_is_warning(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        fake_github.reviewers_fail = True
        result = await engine.submit_for_review(
            REPO, "第二稿", title="校正", reviewers=["stranger"], proofreading=True
        )
        assert result.number == 1
        assert len(fake_github.pulls[REPO]) == 1
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("レビュワーの追加に失敗しました")


@pytest.mark.unit
class TestReads:
    """Test the Reads."""

    async def test_get_file_decodes_content(
        self, engine: RemoteEngine, fake_github: FakeGitHub
    ) -> None:
        sha = fake_github.add_file(REPO, "第一章.md", "吾輩は猫である。" * 20)
        remote = await engine.get_file(REPO, "第一章.md", "main")
        assert remote.content == "吾輩は猫である。" * 20
        assert remote.sha == sha
        assert await engine.read_hash(REPO, "第一章.md") == sha

    async def test_get_missing_file(self, engine: RemoteEngine) -> None:
        with pytest.raises(UpstreamError) as exc_info:
            await engine.get_file(REPO, "none.md")
        assert exc_info.value.status == 404

    async def test_repository_info(self, engine: RemoteEngine) -> None:
        info = await engine.repository_info(REPO)
        assert info["full_name"] == REPO
        with pytest.raises(UpstreamError):
            await engine.repository_info(f"{LOGIN}/missing")


def test_fake_content_is_base64_with_line_breaks(fake_github: FakeGitHub) -> None:
    fake_github.add_file(REPO, "a.md", "x" * 100)
    response = fake_github._get_content(REPO, "a.md", "main")
    content = response.json()["content"]
    assert "\n" in content
    assert base64.b64decode(content.replace("\n", "")) == b"x" * 100


def test_file_change_ignores_file_mode() -> None:
    change = FileChange.model_validate({"path": "a.md", "content": "a", "mode": "100755"})
    assert change.model_dump() == {"path": "a.md", "content": "a", "sha": None}
