"""Integration tests for request-to-archive generation.

These tests run the real description builder, registry, built-in
contributors, templates and packager together, then unpack the produced
archives and check the resulting project on disk.

No external services or build tools are required.
"""

from __future__ import annotations

import io
import os
import stat
import tarfile
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

import pytest

from initforge import ProjectGenerator, build_description
from initforge.errors import InvalidDescriptionError, InvalidPathError

pytestmark = pytest.mark.integration

POM_NS = {"m": "http://maven.apache.org/POM/4.0.0"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unzip(data: bytes, target: Path) -> Path:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        archive.extractall(target)
        for info in archive.infolist():
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                (target / info.filename).chmod(mode)
    return target


def _untar(data: bytes, target: Path) -> Path:
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
        for member in archive.getmembers():
            destination = target / member.name
            if member.isdir():
                destination.mkdir(parents=True, exist_ok=True)
                continue
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(archive.extractfile(member).read())
            destination.chmod(member.mode)
    return target


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestMavenZip:
    def test_unpacked_project(self, tmp_path: Path, catalog):
        generator = ProjectGenerator(catalog=catalog)
        description = build_description(
            {
                "type": "maven-project",
                "groupId": "org.acme",
                "artifactId": "inventory",
                "dependencies": "web,data-jpa,postgresql",
            }
        )
        result = generator.generate(description, archive_format="zip")
        root = _unzip(result.archive, tmp_path) / "inventory"

        pom = ET.parse(root / "pom.xml").getroot()
        assert pom.findtext("m:groupId", namespaces=POM_NS) == "org.acme"
        assert pom.findtext("m:artifactId", namespaces=POM_NS) == "inventory"
        artifacts = [
            dep.findtext("m:artifactId", namespaces=POM_NS)
            for dep in pom.findall("m:dependencies/m:dependency", POM_NS)
        ]
        assert artifacts == [
            "spring-boot-starter-web",
            "spring-boot-starter-data-jpa",
            "postgresql",
            "spring-boot-starter-test",
        ]

        main_class = root / "src/main/java/org/acme/inventory/InventoryApplication.java"
        assert main_class.is_file()
        assert "package org.acme.inventory;" in main_class.read_text(encoding="utf-8")
        if os.name != "nt":
            assert (root / "mvnw").stat().st_mode & stat.S_IXUSR
            assert not (root / "pom.xml").stat().st_mode & stat.S_IXUSR


class TestGradleKotlinTgz:
    def test_unpacked_project(self, tmp_path: Path, catalog):
        generator = ProjectGenerator(catalog=catalog)
        result = generator.generate_from_request(
            {
                "type": "gradle-project-kotlin",
                "language": "kotlin",
                "artifactId": "orders",
                "packaging": "war",
                "dependencies": ["web", "validation"],
                "baseDir": "orders-service",
            },
            archive_format="tgz",
        )
        assert result.filename == "orders-service.tar.gz"
        root = _untar(result.archive, tmp_path) / "orders-service"

        build = (root / "build.gradle.kts").read_text(encoding="utf-8")
        assert 'kotlin("jvm")' in build
        assert "\twar\n" in build
        assert 'providedRuntime("org.springframework.boot:spring-boot-starter-tomcat")' in build
        assert 'implementation("com.fasterxml.jackson.module:jackson-module-kotlin")' in build
        assert (root / "settings.gradle.kts").read_text(encoding="utf-8") == 'rootProject.name = "orders"\n'
        assert (root / "src/main/kotlin/com/example/orders/ServletInitializer.kt").is_file()
        assert (root / "src/test/kotlin/com/example/orders/OrdersApplicationTests.kt").is_file()
        if os.name != "nt":
            assert (root / "gradlew").stat().st_mode & stat.S_IXUSR


class TestWriteTo:
    def test_matches_archive_content(self, tmp_path: Path, catalog):
        generator = ProjectGenerator(catalog=catalog)
        description = build_description({"artifactId": "ledger", "dependencies": "web"})
        result = generator.generate(description, archive_format="zip")

        written = result.write_to(tmp_path / "direct")
        unpacked = _unzip(result.archive, tmp_path / "unpacked") / "ledger"

        direct_files = sorted(p.relative_to(written).as_posix() for p in written.rglob("*") if p.is_file())
        unpacked_files = sorted(p.relative_to(unpacked).as_posix() for p in unpacked.rglob("*") if p.is_file())
        assert direct_files == unpacked_files == result.paths
        for path in result.paths:
            assert (written / path).read_bytes() == (unpacked / path).read_bytes()

    def test_base_directory_names_the_written_root(self, tmp_path: Path, catalog):
        generator = ProjectGenerator(catalog=catalog)
        description = build_description({"artifactId": "ledger", "baseDir": "./books"})
        result = generator.generate(description, archive_format="zip")
        assert result.filename == "books.zip"

        written = result.write_to(tmp_path / "out")
        assert written == (tmp_path / "out" / "books").resolve()
        assert (written / "pom.xml").is_file()

    @pytest.mark.parametrize("root", ["../escaped", "/abs", "."])
    def test_root_outside_target_refused(self, tmp_path: Path, catalog, root):
        generator = ProjectGenerator(catalog=catalog)
        result = generator.generate(build_description({"artifactId": "ledger"}))
        result.root = root

        with pytest.raises(InvalidPathError):
            result.write_to(tmp_path / "out")
        assert not (tmp_path / "escaped").exists()
        assert not (tmp_path / "out" / "pom.xml").exists()

    def test_escaping_base_directory_never_generates(self, catalog):
        generator = ProjectGenerator(catalog=catalog)
        description = build_description({"artifactId": "ledger", "baseDir": "../escaped"})
        with pytest.raises(InvalidDescriptionError):
            generator.generate(description, archive_format="zip")

    def test_repeat_generation_is_byte_identical(self, catalog):
        generator = ProjectGenerator(catalog=catalog)
        description = build_description({"type": "gradle-project", "dependencies": "web,lombok,h2"})
        archives = {generator.generate(description, archive_format="tgz").archive for _ in range(3)}
        assert len(archives) == 1
