import json
from pathlib import Path

import pytest

from assistant_agent.agent_core import ToolCallRequest, ToolDispatcher
from assistant_agent.agent_core.exceptions import ToolExecutionError
from assistant_agent.tools import CWD_PLACEHOLDER, build_default_registry, file_system_tool, resolve_path


def test_read_returns_prefixed_content(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("hello\nworld", encoding="utf-8")

    assert file_system_tool("read", str(target)) == "File content: hello\nworld"


def test_create_makes_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "new.txt"

    result = file_system_tool("create", str(target), "data")

    assert result == f"File {target} created."
    assert target.read_text(encoding="utf-8") == "data"


def test_update_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("old", encoding="utf-8")

    assert file_system_tool("update", str(target), "new") == f"File {target} updated."
    assert target.read_text(encoding="utf-8") == "new"


def test_delete_file(tmp_path: Path) -> None:
    target = tmp_path / "gone.txt"
    target.write_text("x", encoding="utf-8")

    assert file_system_tool("delete", str(target)) == f"File {target} deleted."
    assert not target.exists()


def test_directory_operations(tmp_path: Path) -> None:
    target = tmp_path / "pkg" / "sub"

    assert file_system_tool("createDirectory", str(target)) == f"Directory {target} created."
    (target / "inner.txt").write_text("x", encoding="utf-8")
    (tmp_path / "pkg" / "other").mkdir()
    (tmp_path / "pkg" / "file.txt").write_text("x", encoding="utf-8")

    assert file_system_tool("listDirectories", str(tmp_path / "pkg")) == f"Directories in {tmp_path / 'pkg'}: other, sub"

    assert file_system_tool("deleteDirectory", str(target)) == f"Directory {target} deleted."
    assert not target.exists()


def test_missing_file_raises_tool_error(tmp_path: Path) -> None:
    target = tmp_path / "missing.txt"

    with pytest.raises(ToolExecutionError, match='Error during "read"'):
        file_system_tool("read", str(target))


def test_cwd_placeholder_is_expanded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "here.txt").write_text("found", encoding="utf-8")

    assert resolve_path(f"{CWD_PLACEHOLDER}/here.txt") == (tmp_path / "here.txt").resolve()
    assert file_system_tool("read", "here.txt") == "File content: found"


@pytest.mark.asyncio
async def test_dispatch_through_registry(tmp_path: Path) -> None:
    target = tmp_path / "via_dispatch.txt"
    target.write_text("payload", encoding="utf-8")
    dispatcher = ToolDispatcher(build_default_registry())

    ok = await dispatcher.dispatch(
        ToolCallRequest(
            name="fileSystemTool",
            arguments=json.dumps({"operation": "read", "filePath": str(target)}),
            call_id="c1",
        )
    )
    assert ok.response == {"result": "File content: payload"}

    missing = await dispatcher.dispatch(
        ToolCallRequest(name="fileSystemTool", arguments='{"operation": "read"}', call_id="c2")
    )
    assert missing.response == {"error": "Missing required argument(s) for tool 'fileSystemTool': filePath."}

    bad_operation = await dispatcher.dispatch(
        ToolCallRequest(name="fileSystemTool", arguments=json.dumps({"operation": "chmod", "filePath": "x"}))
    )
    assert bad_operation.is_error
    assert bad_operation.response["error"].startswith("Argument validation failed: operation:")

    failed = await dispatcher.dispatch(
        ToolCallRequest(
            name="fileSystemTool",
            arguments=json.dumps({"operation": "read", "filePath": str(tmp_path / "nope.txt")}),
        )
    )
    assert failed.is_error
    assert failed.response["error"].startswith('Error during "read"')


def test_default_registry_declarations() -> None:
    registry = build_default_registry()

    assert registry.tool_names == ["fileSystemTool", "fileSearchTool", "bashExecutorTool", "dependencyAnalysisTool"]
    declarations = {t["function"]["name"]: t["function"]["parameters"] for t in registry.tool_object or []}
    assert declarations["fileSystemTool"]["required"] == ["operation", "filePath"]
    assert declarations["fileSearchTool"]["required"] == ["operation", "directory"]
    assert declarations["bashExecutorTool"]["required"] == ["command"]
    assert declarations["dependencyAnalysisTool"]["required"] == ["projectPath"]
    assert "read" in declarations["fileSystemTool"]["properties"]["operation"]["enum"]
