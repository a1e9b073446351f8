"""
Parse git:: sources that point at real repositories built with the sandbox
and check that url, subdir and ref resolve against them.
"""

from pathlib import Path

import pytest
from git import Repo  # GitPython

from modsource import parse_source
from sandbox import Git, requires_git

pytestmark = requires_git


def clone(source_url: str, ref: str, target: Path) -> Repo:
    repo = Repo.clone_from(source_url, str(target))
    if ref:
        repo.git.checkout(ref)
    return repo


def test_tagged_subdir_resolves(sandbox_git: Git, tmp_path: Path) -> None:
    sandbox_git.write_file("modules/vpc/main.tf", "# vpc v1\n")
    sandbox_git.commit_all("add vpc module")
    sandbox_git.tag("v1.0.0")
    sandbox_git.push("main")
    sandbox_git.push_tags()

    raw = f"git::file://{sandbox_git.remote_dir}//modules/vpc?ref=v1.0.0"
    source = parse_source(raw)

    assert source.url == f"file://{sandbox_git.remote_dir}"
    assert source.path == str(sandbox_git.remote_dir).removesuffix(".git")
    assert source.subdir == "/modules/vpc"
    assert source.ref == "v1.0.0"

    repo = clone(source.url, source.ref, tmp_path / "clone")
    assert repo.head.commit.hexsha == sandbox_git.rev_parse("v1.0.0")
    module_dir = Path(repo.working_tree_dir) / source.subdir.lstrip("/")
    assert (module_dir / "main.tf").read_text() == "# vpc v1\n"


def test_branch_ref_resolves(sandbox_git: Git, tmp_path: Path) -> None:
    sandbox_git.checkout_new("feature")
    sandbox_git.write_file("main.tf", "# feature\n")
    sandbox_git.commit_all("feature work")
    sandbox_git.push("feature")
    feature_sha = sandbox_git.rev_parse("feature")

    sandbox_git.checkout("main")
    assert sandbox_git.current_branch() == "main"

    source = parse_source(f"git::file://{sandbox_git.remote_dir}?ref=feature")
    repo = clone(source.url, source.ref, tmp_path / "clone")

    assert source.subdir == ""
    assert repo.head.commit.hexsha == feature_sha


def test_merged_branch_reaches_main(sandbox_git: Git, tmp_path: Path) -> None:
    sandbox_git.checkout_new("change")
    sandbox_git.write_file("modules/db/main.tf", "# db\n")
    sandbox_git.commit_all("add db module")
    sandbox_git.checkout("main")
    sandbox_git.merge("change")
    sandbox_git.push("main")

    source = parse_source(f"git::file://{sandbox_git.remote_dir}//modules/db?ref=main")
    repo = clone(source.url, source.ref, tmp_path / "clone")

    assert repo.head.commit.hexsha == sandbox_git.rev_parse("main")
    assert (Path(repo.working_tree_dir) / "modules/db/main.tf").exists()


def test_pull_picks_up_remote_commits(sandbox_git: Git, tmp_path: Path) -> None:
    other = Git(tmp_path / "other", remote_root=tmp_path)
    other.init_basic()
    other.remote_add("origin", str(sandbox_git.remote_dir))
    other.pull("main")
    other.write_file("modules/dns/main.tf", "# dns\n")
    other.commit_all("add dns module")
    other.push("main")

    sandbox_git.pull("main")

    assert sandbox_git.rev_parse("main") == other.rev_parse("main")
    assert (sandbox_git.base_dir / "modules/dns/main.tf").exists()


def test_git_failures_fail_the_test(sandbox_git: Git) -> None:
    with pytest.raises(pytest.fail.Exception):
        sandbox_git.checkout("no-such-branch")
