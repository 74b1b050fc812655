"""File-search tool: file-name search, content search and a project survey."""

import json
import os
from collections import Counter
from pathlib import Path
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Sequence

from pydantic import Field

from ..agent_core.exceptions import ToolExecutionError
from ..agent_core.logger import get_logger
from .filesystem import resolve_path

logger = get_logger(__name__)

DEFAULT_IGNORE_DIRS = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    ".cache",
    ".vscode",
    ".idea",
    "__pycache__",
    ".venv",
]

KEY_PROJECT_FILES = [
    "README.md",
    "package.json",
    "tsconfig.json",
    "webpack.config.js",
    "vite.config.js",
    ".env.example",
    "docker-compose.yml",
    "Dockerfile",
    "requirements.txt",
    "setup.py",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    "go.mod",
    "Cargo.toml",
    "composer.json",
    "Gemfile",
]

FILE_CATEGORIES: Dict[str, List[str]] = {
    "javascript": [".js", ".jsx", ".ts", ".tsx"],
    "python": [".py", ".pyx", ".ipynb"],
    "web": [".html", ".css", ".scss", ".sass"],
    "config": [".json", ".yaml", ".yml", ".toml", ".ini", ".conf"],
    "documentation": [".md", ".txt", ".rst", ".adoc"],
    "data": [".csv", ".xml", ".sql"],
    "misc": [".sh", ".bat", ".ps1", ".rb", ".php", ".go", ".java", ".kt", ".rs", ".c", ".cpp", ".h", ".hpp"],
}

FRAMEWORK_INDICATORS: Dict[str, List[str]] = {
    "package.json": ["react", "vue", "angular", "next", "express", "nestjs", "koa"],
    "vite.config.js": ["vue", "react"],
    "next.config.js": ["nextjs"],
    "angular.json": ["angular"],
    "nuxt.config.js": ["nuxt"],
    "django": ["django"],
    "requirements.txt": ["flask", "django", "fastapi"],
    "pyproject.toml": ["flask", "django", "fastapi"],
    "pom.xml": ["spring"],
    "build.gradle": ["spring", "android"],
    "go.mod": ["gin", "echo"],
    "composer.json": ["laravel", "symfony"],
    "Gemfile": ["rails"],
}

KEY_FILE_PREVIEW_CHARS = 5000
TREE_DEPTH = 2


def iter_files(root: Path, recursive: bool, ignore_dirs: Sequence[str]) -> Iterator[Path]:
    """Yield files below ``root`` in a stable order, skipping ignored directory names.

    Unreadable directories are skipped silently.
    """
    for current, dirs, files in os.walk(root, onerror=lambda _: None):
        dirs[:] = sorted(d for d in dirs if d not in ignore_dirs) if recursive else []
        for name in sorted(files):
            yield Path(current) / name


def detect_languages(files: Sequence[Path]) -> List[str]:
    """Language categories present, most files first."""
    extensions = Counter(f.suffix.lower() for f in files if f.suffix)
    counts = {category: sum(extensions[ext] for ext in exts) for category, exts in FILE_CATEGORIES.items()}
    ranked = sorted(((c, n) for c, n in counts.items() if n > 0), key=lambda item: -item[1])
    return [category for category, _ in ranked]


def detect_frameworks(files: Sequence[Path]) -> List[str]:
    frameworks: List[str] = []
    for f in files:
        for indicator, candidates in FRAMEWORK_INDICATORS.items():
            if f.name == indicator or f.parent.name == indicator:
                frameworks.extend(c for c in candidates if c not in frameworks)
    return frameworks


def _summarize_tree(tree: Dict[str, Any], depth: int = 0) -> Any:
    if depth >= TREE_DEPTH:
        return f"{len(tree)} files/directories" if tree else {}
    return {key: None if value is None else _summarize_tree(value, depth + 1) for key, value in tree.items()}


def _find(root: Path, pattern: str, recursive: bool, ignore_dirs: Sequence[str], max_results: int) -> Dict[str, Any]:
    needle = pattern.lower()
    matches: List[str] = []
    for f in iter_files(root, recursive, ignore_dirs):
        if needle in f.name.lower():
            matches.append(str(f))
            if len(matches) >= max_results:
                break
    return {
        "status": "success",
        "operation": "find",
        "directory": str(root),
        "files": matches or "No matching files.",
    }


def _grep(root: Path, pattern: str, recursive: bool, ignore_dirs: Sequence[str], max_results: int) -> Dict[str, Any]:
    needle = pattern.lower()
    occurrences: List[str] = []
    for f in iter_files(root, recursive, ignore_dirs):
        if len(occurrences) >= max_results:
            break
        try:
            lines = f.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            continue
        for number, line in enumerate(lines, start=1):
            if needle in line.lower():
                occurrences.append(f"{f} [line {number}]: {line}")
                if len(occurrences) >= max_results:
                    break
    return {
        "status": "success",
        "operation": "grep",
        "directory": str(root),
        "occurrences": occurrences or "No occurrences found.",
    }


def _explore_project(root: Path, ignore_dirs: Sequence[str]) -> Dict[str, Any]:
    files = list(iter_files(root, True, ignore_dirs))
    tree: Dict[str, Any] = {}
    directory_count = 0

    for f in files:
        node = tree
        *parents, name = f.relative_to(root).parts
        for part in parents:
            if part not in node:
                node[part] = {}
                directory_count += 1
            node = node[part]
        node[name] = None

    key_files: Dict[str, Any] = {}
    for key in KEY_PROJECT_FILES:
        candidates = [f for f in files if f.name.lower() == key.lower()]
        if not candidates:
            continue
        try:
            text = candidates[0].read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            key_files[key] = {"path": str(candidates[0]), "error": "Could not read the file."}
            continue
        if len(text) > KEY_FILE_PREVIEW_CHARS:
            text = text[:KEY_FILE_PREVIEW_CHARS] + "..."
        key_files[key] = {"path": str(candidates[0]), "content": text}

    languages = detect_languages(files)
    frameworks = detect_frameworks(files)
    summary = "\n".join(
        [
            f"Project located at: {root}",
            f"Number of files: {len(files)}",
            f"Number of directories: {directory_count}",
            f"Main languages: {', '.join(languages)}",
            f"Possible frameworks: {', '.join(frameworks) if frameworks else 'None detected'}",
            f"Key files found: {', '.join(key_files)}",
        ]
    )
    return {
        "rootDirectory": str(root),
        "fileCount": len(files),
        "directoryCount": directory_count,
        "extensions": dict(Counter(f.suffix.lower() for f in files if f.suffix)),
        "keyFiles": key_files,
        "languages": languages,
        "frameworks": frameworks,
        "directoryStructure": _summarize_tree(tree),
        "summary": summary,
    }


def file_search_tool(
    operation: Annotated[
        Literal["find", "grep", "exploreProject"],
        Field(
            description=(
                "find: files whose name contains 'pattern'. grep: lines containing 'pattern'. "
                "exploreProject: survey of the project structure, languages and key files."
            )
        ),
    ],
    directory: Annotated[str, Field(description="Directory to search in.")],
    pattern: Annotated[Optional[str], Field(description="Case-insensitive text to look for (find and grep).")] = None,
    recursive: Annotated[bool, Field(description="Descend into sub-directories.")] = True,
    ignoreDirs: Annotated[
        Optional[List[str]], Field(description="Directory names to skip. Defaults to common build and VCS folders.")
    ] = None,
    maxResults: Annotated[int, Field(description="Maximum number of results.", ge=1)] = 1000,
) -> str:
    """Search files by name or content, or explore a project's structure."""
    if operation != "exploreProject" and not (pattern and pattern.strip()):
        raise ToolExecutionError("The 'pattern' key is required for 'find' and 'grep' and must be a non-empty string.")

    root = resolve_path(directory)
    if not root.is_dir():
        raise ToolExecutionError(f'The directory "{root}" does not exist or is not accessible.')

    ignore_dirs = DEFAULT_IGNORE_DIRS if ignoreDirs is None else ignoreDirs
    logger.debug("fileSearchTool %s in %s", operation, root)

    if operation == "find":
        result = _find(root, pattern or "", recursive, ignore_dirs, maxResults)
    elif operation == "grep":
        result = _grep(root, pattern or "", recursive, ignore_dirs, maxResults)
    else:
        result = _explore_project(root, ignore_dirs)
    return json.dumps(result, indent=2, ensure_ascii=False)
