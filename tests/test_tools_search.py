import json
from pathlib import Path

import pytest

from assistant_agent.agent_core.exceptions import ToolExecutionError
from assistant_agent.tools import file_search_tool


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src" / "app").mkdir(parents=True)
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "README.md").write_text("# Demo\nA demo project.\n", encoding="utf-8")
    (root / "requirements.txt").write_text("flask==3.0\n", encoding="utf-8")
    (root / "src" / "app" / "main.py").write_text("import flask\n\ndef main():\n    return 'TODO: ship'\n", encoding="utf-8")
    (root / "src" / "app" / "helpers.py").write_text("def helper():\n    pass\n", encoding="utf-8")
    (root / "src" / "index.ts").write_text("export const main = 1;\n", encoding="utf-8")
    (root / "node_modules" / "dep" / "main.js").write_text("module.exports = 'main';\n", encoding="utf-8")
    return root


def test_find_matches_file_names(project: Path) -> None:
    result = json.loads(file_search_tool("find", str(project), pattern="MAIN"))

    assert result["status"] == "success"
    assert result["operation"] == "find"
    assert sorted(Path(f).name for f in result["files"]) == ["main.py"]


def test_find_honours_custom_ignore_dirs(project: Path) -> None:
    result = json.loads(file_search_tool("find", str(project), pattern="main", ignoreDirs=[]))

    assert sorted(Path(f).name for f in result["files"]) == ["main.js", "main.py"]


def test_find_non_recursive(project: Path) -> None:
    result = json.loads(file_search_tool("find", str(project), pattern=".md", recursive=False))
    assert [Path(f).name for f in result["files"]] == ["README.md"]

    nested = json.loads(file_search_tool("find", str(project), pattern="main", recursive=False))
    assert nested["files"] == "No matching files."


def test_find_respects_max_results(project: Path) -> None:
    result = json.loads(file_search_tool("find", str(project), pattern=".", maxResults=2))
    assert len(result["files"]) == 2


def test_grep_reports_line_numbers(project: Path) -> None:
    result = json.loads(file_search_tool("grep", str(project), pattern="todo"))

    assert result["operation"] == "grep"
    assert len(result["occurrences"]) == 1
    occurrence = result["occurrences"][0]
    assert occurrence.endswith("main.py [line 4]:     return 'TODO: ship'")


def test_grep_without_hits(project: Path) -> None:
    result = json.loads(file_search_tool("grep", str(project), pattern="does-not-appear"))
    assert result["occurrences"] == "No occurrences found."


@pytest.mark.parametrize("operation", ["find", "grep"])
def test_pattern_is_required(project: Path, operation: str) -> None:
    with pytest.raises(ToolExecutionError, match="'pattern' key is required"):
        file_search_tool(operation, str(project))


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ToolExecutionError, match="does not exist"):
        file_search_tool("find", str(tmp_path / "absent"), pattern="x")


def test_explore_project(project: Path) -> None:
    result = json.loads(file_search_tool("exploreProject", str(project)))

    assert result["rootDirectory"] == str(project.resolve())
    assert result["fileCount"] == 5
    assert result["directoryCount"] == 2
    assert result["extensions"] == {".md": 1, ".txt": 1, ".py": 2, ".ts": 1}
    assert result["languages"][0] == "python"
    assert "javascript" in result["languages"]
    assert "flask" in result["frameworks"]
    assert set(result["keyFiles"]) == {"README.md", "requirements.txt"}
    assert result["keyFiles"]["requirements.txt"]["content"] == "flask==3.0\n"
    assert "node_modules" not in result["directoryStructure"]
    assert result["directoryStructure"]["src"]["app"] == "2 files/directories"
    assert result["directoryStructure"]["src"]["index.ts"] is None
    assert "Number of files: 5" in result["summary"]


def test_explore_project_truncates_key_files(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("x" * 6000, encoding="utf-8")

    result = json.loads(file_search_tool("exploreProject", str(tmp_path)))

    content = result["keyFiles"]["README.md"]["content"]
    assert len(content) == 5003
    assert content.endswith("...")
