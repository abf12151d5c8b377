"""Tests for changed API file discovery."""

from unittest.mock import AsyncMock, patch

import pytest

from maint.execution.changes import ChangedFileSource, endpoint_name, is_api_file
from maint.execution.process import CommandResult


@pytest.mark.parametrize(
    "path,expected",
    [
        ("api/users.js", True),
        ("server/api/auth/login.ts", True),
        ("src/routes/orders.js", True),
        ("endpoints/health.js", True),
        ("./api/users.js", True),
        ("api/users.py", False),
        ("src/cart.js", False),
        ("myapi/users.js", False),
    ],
)
def test_is_api_file(path, expected):
    assert is_api_file(path) is expected


@pytest.mark.parametrize(
    "path,expected",
    [
        ("api/users.js", "users"),
        ("server/api/auth/login.js", "auth/login"),
        ("routes/orders.ts", "orders"),
        ("src/routes/orders.ts", "src/routes/orders"),
    ],
)
def test_endpoint_name(path, expected):
    assert endpoint_name(path) == expected


@pytest.fixture
def project(tmp_path):
    (tmp_path / "api").mkdir()
    (tmp_path / "api" / "users.js").write_text("users")
    (tmp_path / "server" / "api" / "auth").mkdir(parents=True)
    (tmp_path / "server" / "api" / "auth" / "login.js").write_text("login")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "cart.js").write_text("cart")
    return tmp_path


def git_diff_returning(stdout, exit_code=0):
    return AsyncMock(return_value=CommandResult(command=("git",), exit_code=exit_code, stdout=stdout))


@pytest.mark.asyncio
async def test_changed_files_keeps_existing_api_files(project):
    diff = "api/users.js\nsrc/cart.js\napi/deleted.js\nREADME.md\n"
    with patch("maint.execution.changes.run_command", new=git_diff_returning(diff)) as run:
        files = await ChangedFileSource(project, base="main", head="feature").files()

    assert files == ["api/users.js"]
    assert run.await_args.args[0] == ["git", "diff", "--name-only", "main", "feature"]
    assert run.await_args.kwargs["cwd"] == project


@pytest.mark.asyncio
async def test_failed_diff_scans_all_api_files(project):
    with patch("maint.execution.changes.run_command", new=git_diff_returning("", exit_code=128)):
        files = await ChangedFileSource(project).files()

    assert files == ["server/api/auth/login.js", "api/users.js"]


def test_scan_without_api_directories(tmp_path):
    assert ChangedFileSource(tmp_path).scan() == []
