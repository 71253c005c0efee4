"""
Tests for project descriptor discovery, naming and file ownership.
"""

from pathlib import Path

import pytest

from codescrub.core.projects import (
    UNKNOWN_PROJECT,
    ProjectMapping,
    build_project_mapping,
    find_project_descriptors,
    is_project_root,
    read_project_name,
)

SDK_PROJECT = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <AssemblyName>{name}</AssemblyName>
  </PropertyGroup>
</Project>
"""

LEGACY_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <PropertyGroup>
    <OutputType>Library</OutputType>
    <AssemblyName>Legacy.Core</AssemblyName>
  </PropertyGroup>
</Project>
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestReadProjectName:
    def test_assembly_name(self, tmp_path):
        descriptor = _write(tmp_path / "App" / "App.csproj", SDK_PROJECT.format(name="MyApp"))
        assert read_project_name(descriptor) == "MyApp"

    def test_namespaced_project_file(self, tmp_path):
        descriptor = _write(tmp_path / "Core" / "Core.csproj", LEGACY_PROJECT)
        assert read_project_name(descriptor) == "Legacy.Core"

    def test_missing_assembly_name_uses_stem(self, tmp_path):
        descriptor = _write(
            tmp_path / "Lib" / "Lib.fsproj",
            "<Project><PropertyGroup><AssemblyName>  </AssemblyName></PropertyGroup></Project>",
        )
        assert read_project_name(descriptor) == "Lib"

    def test_malformed_xml_uses_stem(self, tmp_path):
        descriptor = _write(tmp_path / "Broken.vbproj", "<Project><PropertyGroup>")
        assert read_project_name(descriptor) == "Broken"

    def test_scoped_package_name(self, tmp_path):
        descriptor = _write(tmp_path / "web" / "package.json", '{"name": "@acme/storefront"}')
        assert read_project_name(descriptor) == "acme.storefront"

    def test_angular_default_project(self, tmp_path):
        descriptor = _write(
            tmp_path / "angular.json",
            '{"version": 1, "projects": {"lib": {}, "shop": {}}, "defaultProject": "shop"}',
        )
        assert read_project_name(descriptor) == "shop"

    def test_angular_first_project(self, tmp_path):
        descriptor = _write(
            tmp_path / "angular.json", '{\n  "projects": {\n    "admin": {"root": ""}\n  }\n}'
        )
        assert read_project_name(descriptor) == "admin"

    def test_pyproject_name(self, tmp_path):
        descriptor = _write(
            tmp_path / "svc" / "pyproject.toml",
            '[build-system]\nrequires = ["hatchling"]\n\n[project]\nname = "billing-service"\n',
        )
        assert read_project_name(descriptor) == "billing-service"

    def test_poetry_name(self, tmp_path):
        descriptor = _write(
            tmp_path / "svc" / "pyproject.toml", "[tool.poetry]\nname = 'worker'\nversion = '1.0'\n"
        )
        assert read_project_name(descriptor) == "worker"

    def test_nameless_manifest_uses_directory(self, tmp_path):
        descriptor = _write(tmp_path / "frontend" / "package.json", '{"private": true}')
        assert read_project_name(descriptor) == "frontend"


class TestDiscovery:
    def test_project_root_markers(self, tmp_path):
        (tmp_path / "sln").mkdir()
        (tmp_path / "sln" / "Shop.sln").write_text("", encoding="utf-8")
        (tmp_path / "py").mkdir()
        (tmp_path / "py" / "pyproject.toml").write_text("", encoding="utf-8")
        (tmp_path / "plain").mkdir()
        (tmp_path / "plain" / "main.cs").write_text("", encoding="utf-8")

        assert is_project_root(tmp_path / "sln")
        assert is_project_root(tmp_path / "py")
        assert not is_project_root(tmp_path / "plain")
        assert not is_project_root(tmp_path / "missing")

    def test_descriptors_found_in_sorted_order(self, tmp_path):
        _write(tmp_path / "b" / "B.csproj", SDK_PROJECT.format(name="B"))
        _write(tmp_path / "a" / "package.json", '{"name": "a"}')
        _write(tmp_path / "node_modules" / "dep" / "package.json", '{"name": "dep"}')
        _write(tmp_path / "a" / "index.ts", "")

        descriptors = find_project_descriptors(tmp_path)

        assert descriptors == [tmp_path / "a" / "package.json", tmp_path / "b" / "B.csproj"]


class TestOwnership:
    @pytest.fixture
    def mapping(self, tmp_path):
        _write(tmp_path / "App" / "App.csproj", SDK_PROJECT.format(name="MyApp"))
        _write(tmp_path / "App" / "Plugins" / "Plugins.csproj", SDK_PROJECT.format(name="MyPlugins"))
        return build_project_mapping(tmp_path)

    def test_deepest_ancestor_wins(self, tmp_path, mapping):
        assert mapping.name_for(tmp_path / "App" / "Plugins" / "Export" / "Csv.cs") == "MyPlugins"
        assert mapping.name_for(tmp_path / "App" / "Program.cs") == "MyApp"

    def test_unowned_file(self, tmp_path, mapping):
        assert mapping.name_for(tmp_path / "tools" / "gen.cs") == UNKNOWN_PROJECT
        assert mapping.owner_of(tmp_path / "tools" / "gen.cs") is None

    def test_prefix_is_per_path_component(self, tmp_path, mapping):
        assert mapping.name_for(tmp_path / "AppExtra" / "x.cs") == UNKNOWN_PROJECT

    def test_compiled_descriptor_beats_manifest_in_same_directory(self, tmp_path):
        _write(tmp_path / "Web" / "package.json", '{"name": "web-client"}')
        _write(tmp_path / "Web" / "Web.csproj", SDK_PROJECT.format(name="Web.Host"))
        mapping = build_project_mapping(tmp_path)
        assert mapping.name_for(tmp_path / "Web" / "Startup.cs") == "Web.Host"

    def test_workspace_manifest_beats_package_manifest(self, tmp_path):
        _write(tmp_path / "package.json", '{"name": "from-package"}')
        _write(tmp_path / "angular.json", '{"projects": {"from-workspace": {}}}')
        mapping = build_project_mapping(tmp_path)
        assert mapping.name_for(tmp_path / "src" / "main.ts") == "from-workspace"

    def test_empty_mapping(self):
        mapping = ProjectMapping()
        assert len(mapping) == 0
        assert mapping.name_for(Path("/x/y.cs")) == UNKNOWN_PROJECT
