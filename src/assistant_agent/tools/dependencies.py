"""Dependency-analysis tool: reads a project's manifest and lists what it depends on."""

import json
import re
from pathlib import Path
from typing import Annotated, Any, Callable, Dict, List, Tuple
from xml.etree import ElementTree

from pydantic import Field

from ..agent_core.exceptions import ToolExecutionError
from ..agent_core.logger import get_logger
from .filesystem import resolve_path

logger = get_logger(__name__)

DEPENDENCY_ANALYSIS_TOOL = "dependencyAnalysisTool"

NODE_TECHNOLOGIES = {
    "react": "React",
    "react-dom": "React DOM",
    "vue": "Vue.js",
    "angular": "Angular",
    "@angular/core": "Angular",
    "next": "Next.js",
    "nuxt": "Nuxt.js",
    "express": "Express.js",
    "koa": "Koa.js",
    "@nestjs/core": "NestJS",
    "electron": "Electron",
}

PYTHON_TECHNOLOGIES = {
    "django": "Django",
    "flask": "Flask",
    "fastapi": "FastAPI",
    "streamlit": "Streamlit",
    "dash": "Dash",
    "numpy": "NumPy",
    "pandas": "Pandas",
    "tensorflow": "TensorFlow",
    "torch": "PyTorch",
}

_REQUIREMENT = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)(\[[^\]]*\])?\s*(.*)$")
_GO_REQUIRE = re.compile(r"^([^\s]+)\s+(v[^\s]+)")
_TOML_SECTION = re.compile(r"^\[([^\]]+)\]\s*$")
_TOML_DEPENDENCY = re.compile(r"""^([A-Za-z0-9_-]+)\s*=\s*(?:"([^"]*)"|\{.*?version\s*=\s*"([^"]*)".*\}|(.*))$""")
_GRADLE_DEPENDENCY = re.compile(
    r"""\b(implementation|api|compile|compileOnly|runtimeOnly|testImplementation|testCompile)\s*\(?\s*['"]"""
    r"""([^:'"]+:[^:'"]+)(?::([^'"]+))?['"]"""
)
_GEM = re.compile(r"""^\s*gem\s+['"]([^'"]+)['"](?:\s*,\s*['"]([^'"]+)['"])?""")


def _technologies(dependencies: Dict[str, str], known: Dict[str, str]) -> List[str]:
    detected: List[str] = []
    for package, label in known.items():
        if package in dependencies and label not in detected:
            detected.append(label)
    return detected


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _read_json_object(path: Path) -> Dict[str, Any]:
    data = json.loads(_read_text(path))
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def _analyze_node(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    manifest = _read_json_object(root / "package.json")
    dependencies = dict(manifest.get("dependencies") or {})

    result["projectType"] = "Node.js/JavaScript"
    result["projectName"] = manifest.get("name") or "N/A"
    result["projectVersion"] = manifest.get("version") or "N/A"
    result["dependencies"] = dependencies
    if include_dev and manifest.get("devDependencies"):
        result["devDependencies"] = dict(manifest["devDependencies"])
    if manifest.get("peerDependencies"):
        result["peerDependencies"] = dict(manifest["peerDependencies"])
    result["detectedTechnologies"] = _technologies(dependencies, NODE_TECHNOLOGIES)


def _analyze_python(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    dependencies: Dict[str, str] = {}
    for line in _read_text(root / "requirements.txt").splitlines():
        line = line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        match = _REQUIREMENT.match(line)
        if not match:
            continue
        name, _, specifier = match.groups()
        specifier = specifier.split(";", 1)[0].strip()
        if specifier.startswith("=="):
            specifier = specifier[2:].strip()
        dependencies[name] = specifier or "latest"

    normalized = {name.lower(): version for name, version in dependencies.items()}
    result["projectType"] = "Python"
    result["dependencies"] = dependencies
    result["detectedTechnologies"] = _technologies(normalized, PYTHON_TECHNOLOGIES)
    result["hasSetupPy"] = (root / "setup.py").is_file()


def _analyze_maven(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    tree = ElementTree.parse(root / "pom.xml")
    namespace = ""
    if tree.getroot().tag.startswith("{"):
        namespace = tree.getroot().tag.split("}", 1)[0] + "}"

    dependencies: Dict[str, str] = {}
    dev_dependencies: Dict[str, str] = {}
    for node in tree.getroot().iter(f"{namespace}dependency"):
        group = node.findtext(f"{namespace}groupId", "").strip()
        artifact = node.findtext(f"{namespace}artifactId", "").strip()
        if not artifact:
            continue
        version = node.findtext(f"{namespace}version", "").strip() or "managed"
        scope = node.findtext(f"{namespace}scope", "").strip()
        target = dev_dependencies if scope == "test" else dependencies
        target[f"{group}:{artifact}" if group else artifact] = version

    result["projectType"] = "Java (Maven)"
    result["dependencies"] = dependencies
    if include_dev and dev_dependencies:
        result["devDependencies"] = dev_dependencies


def _analyze_gradle(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    dependencies: Dict[str, str] = {}
    dev_dependencies: Dict[str, str] = {}
    for configuration, coordinate, version in _GRADLE_DEPENDENCY.findall(_read_text(root / "build.gradle")):
        target = dev_dependencies if configuration.startswith("test") else dependencies
        target[coordinate] = version or "managed"

    result["projectType"] = "Java/Kotlin (Gradle)"
    result["dependencies"] = dependencies
    if include_dev and dev_dependencies:
        result["devDependencies"] = dev_dependencies


def _analyze_go(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    dependencies: Dict[str, str] = {}
    in_block = False
    for raw in _read_text(root / "go.mod").splitlines():
        line = raw.split("//", 1)[0].strip()
        if line.startswith("module "):
            result["projectName"] = line.split(None, 1)[1]
        elif line == "require (":
            in_block = True
        elif in_block and line == ")":
            in_block = False
        elif in_block or line.startswith("require "):
            match = _GO_REQUIRE.match(line[len("require "):] if line.startswith("require ") else line)
            if match:
                dependencies[match.group(1)] = match.group(2)

    result["projectType"] = "Go"
    result["dependencies"] = dependencies


def _analyze_rust(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    sections: Dict[str, Dict[str, str]] = {}
    section = ""
    for raw in _read_text(root / "Cargo.toml").splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        header = _TOML_SECTION.match(line)
        if header:
            section = header.group(1).strip()
            continue
        match = _TOML_DEPENDENCY.match(line)
        if not match:
            continue
        key, plain, table_version, other = match.groups()
        if section == "package" and key in ("name", "version"):
            result["projectName" if key == "name" else "projectVersion"] = plain or ""
        elif section in ("dependencies", "dev-dependencies"):
            sections.setdefault(section, {})[key] = plain or table_version or (other or "").strip() or "*"

    result["projectType"] = "Rust"
    result["dependencies"] = sections.get("dependencies", {})
    if include_dev and sections.get("dev-dependencies"):
        result["devDependencies"] = sections["dev-dependencies"]


def _analyze_php(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    manifest = _read_json_object(root / "composer.json")
    result["projectType"] = "PHP"
    result["projectName"] = manifest.get("name") or "N/A"
    result["dependencies"] = dict(manifest.get("require") or {})
    if include_dev and manifest.get("require-dev"):
        result["devDependencies"] = dict(manifest["require-dev"])


def _analyze_ruby(root: Path, include_dev: bool, result: Dict[str, Any]) -> None:
    dependencies: Dict[str, str] = {}
    for line in _read_text(root / "Gemfile").splitlines():
        match = _GEM.match(line)
        if match:
            dependencies[match.group(1)] = match.group(2) or "latest"

    result["projectType"] = "Ruby"
    result["dependencies"] = dependencies


# Checked in order; the first manifest present decides the project type.
MANIFEST_ANALYZERS: List[Tuple[str, Callable[[Path, bool, Dict[str, Any]], None]]] = [
    ("package.json", _analyze_node),
    ("requirements.txt", _analyze_python),
    ("pom.xml", _analyze_maven),
    ("build.gradle", _analyze_gradle),
    ("go.mod", _analyze_go),
    ("Cargo.toml", _analyze_rust),
    ("composer.json", _analyze_php),
    ("Gemfile", _analyze_ruby),
]


def _summary(result: Dict[str, Any], include_dev: bool) -> str:
    lines = []
    if result.get("projectName"):
        version = result.get("projectVersion")
        lines.append(f"Project {result['projectName']}" + (f" (v{version})" if version else ""))
    lines.append(f"Type: {result['projectType']}")
    lines.append(f"Dependencies: {len(result['dependencies'])}")
    if include_dev:
        lines.append(f"Development dependencies: {len(result.get('devDependencies', {}))}")
    if "detectedTechnologies" in result:
        lines.append(f"Detected technologies: {', '.join(result['detectedTechnologies']) or 'none'}")
    return "\n".join(lines)


def dependency_analysis_tool(
    projectPath: Annotated[str, Field(description="Root directory of the project to analyze.")],
    includeDevDependencies: Annotated[
        bool, Field(description="Also list development and test dependencies.")
    ] = True,
) -> str:
    """
    Analyze a project's dependencies from its manifest file.

    Recognizes package.json, requirements.txt, pom.xml, build.gradle, go.mod,
    Cargo.toml, composer.json and Gemfile.
    """
    root = resolve_path(projectPath)
    if not root.is_dir():
        raise ToolExecutionError(f'The directory "{root}" does not exist or is not accessible.')

    result: Dict[str, Any] = {"projectPath": str(root), "dependencies": {}}
    for manifest, analyze in MANIFEST_ANALYZERS:
        if not (root / manifest).is_file():
            continue
        logger.debug("dependencyAnalysisTool reading %s", root / manifest)
        try:
            analyze(root, includeDevDependencies, result)
        except (ValueError, TypeError, ElementTree.ParseError) as exc:
            raise ToolExecutionError(f"Failed to parse {manifest}: {exc}") from exc
        result["manifest"] = manifest
        result["summary"] = _summary(result, includeDevDependencies)
        break
    else:
        result["summary"] = "No recognized dependency manifest found in this project."

    return json.dumps(result, indent=2, ensure_ascii=False)
