from pathlib import Path
import textwrap

import pytest

from routeguard.domain.errors import ProjectLoadFailure
from routeguard.repo.project import load_project


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


POM = """
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>{name}</artifactId>
  {extra}
</project>
"""


def test_maven_project_uses_main_sources(tmp_path: Path):
    write(tmp_path / "pom.xml", POM.format(name="app", extra=""))
    (tmp_path / "src" / "main" / "java").mkdir(parents=True)
    (tmp_path / "src" / "test" / "java").mkdir(parents=True)

    project = load_project(tmp_path)

    assert project.build_tool == "maven"
    assert project.source_roots == [(tmp_path / "src" / "main" / "java").resolve()]


def test_maven_modules_and_custom_source_directory(tmp_path: Path):
    write(
        tmp_path / "pom.xml",
        POM.format(name="parent", extra="<modules><module>api</module><module>web</module></modules>"),
    )
    write(tmp_path / "api" / "pom.xml", POM.format(name="api", extra=""))
    (tmp_path / "api" / "src" / "main" / "java").mkdir(parents=True)
    write(
        tmp_path / "web" / "pom.xml",
        POM.format(name="web", extra="<build><sourceDirectory>java</sourceDirectory></build>"),
    )
    (tmp_path / "web" / "java").mkdir(parents=True)

    project = load_project(tmp_path)
    root = tmp_path.resolve()

    # the aggregator has no sources of its own
    assert project.source_roots == [
        root / "api" / "src" / "main" / "java",
        root / "web" / "java",
    ]


def test_gradle_project_with_included_subprojects(tmp_path: Path):
    write(tmp_path / "build.gradle", "plugins { id 'java' }\n")
    write(tmp_path / "settings.gradle", "rootProject.name = 'shop'\ninclude 'orders', ':billing:core'\n")
    (tmp_path / "orders" / "src" / "main" / "java").mkdir(parents=True)
    (tmp_path / "billing" / "core" / "src" / "main" / "java").mkdir(parents=True)

    project = load_project(tmp_path)
    root = tmp_path.resolve()

    assert project.build_tool == "gradle"
    assert project.source_roots == [
        root / "orders" / "src" / "main" / "java",
        root / "billing" / "core" / "src" / "main" / "java",
    ]


def test_missing_path_is_fatal(tmp_path: Path):
    with pytest.raises(ProjectLoadFailure):
        load_project(tmp_path / "nope")


def test_directory_without_descriptor_is_fatal(tmp_path: Path):
    with pytest.raises(ProjectLoadFailure, match="No build descriptor"):
        load_project(tmp_path)


def test_malformed_pom_is_fatal(tmp_path: Path):
    write(tmp_path / "pom.xml", "<project><artifactId>broken</project>")
    with pytest.raises(ProjectLoadFailure, match="Malformed"):
        load_project(tmp_path)


def test_missing_maven_module_is_fatal(tmp_path: Path):
    write(tmp_path / "pom.xml", POM.format(name="parent", extra="<modules><module>gone</module></modules>"))
    with pytest.raises(ProjectLoadFailure, match="module directory not found"):
        load_project(tmp_path)
