"""Unit tests for FileSystemGateway."""

from pathlib import Path

from ux_commit_check.infrastructure.gateways.filesystem_gateway import FileSystemGateway


def _touch(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestFileSystemGateway:
    def setup_method(self) -> None:
        self.gateway = FileSystemGateway()

    def test_exists_only_for_files(self, tmp_path: Path) -> None:
        _touch(tmp_path, "a.js")
        assert self.gateway.exists(str(tmp_path / "a.js"))
        assert not self.gateway.exists(str(tmp_path))
        assert not self.gateway.exists(str(tmp_path / "missing.js"))

    def test_read_and_write_text(self, tmp_path: Path) -> None:
        target = str(tmp_path / "out.yaml")
        self.gateway.write_text(target, "rule1:\n  enabled: true\n")
        assert self.gateway.read_text(target) == "rule1:\n  enabled: true\n"

    def test_read_text_replaces_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.js"
        path.write_bytes(b"const a = '\xff';")
        assert "�" in self.gateway.read_text(str(path))

    def test_search_files_prunes_build_dirs(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/api/user.js")
        _touch(tmp_path, "src/pages/List.tsx")
        _touch(tmp_path, "src/styles/app.css")
        _touch(tmp_path, "node_modules/lib/index.js")
        _touch(tmp_path, "dist/bundle.js")
        found = self.gateway.search_files(str(tmp_path), (".js", ".tsx"))
        relative = sorted(str(Path(p).relative_to(tmp_path).as_posix()) for p in found)
        assert relative == ["src/api/user.js", "src/pages/List.tsx"]

    def test_search_files_with_name_prefixes(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/api/user.js")
        _touch(tmp_path, "src/actions.js")
        _touch(tmp_path, "src/services/order.ts")
        _touch(tmp_path, "src/pages/user.js")
        found = self.gateway.search_files(str(tmp_path), (".js", ".ts"), ("action", "api", "service"))
        relative = sorted(Path(p).relative_to(tmp_path).as_posix() for p in found)
        assert relative == ["src/actions.js", "src/api/user.js", "src/services/order.ts"]

    def test_search_missing_root_is_empty(self, tmp_path: Path) -> None:
        assert self.gateway.search_files(str(tmp_path / "nope"), (".js",)) == []

    def test_collect_files_expands_directories(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/b.js")
        _touch(tmp_path, "src/a/c.vue")
        _touch(tmp_path, "src/node_modules/x.js")
        single = _touch(tmp_path, "one.html")
        collected = self.gateway.collect_files([str(tmp_path / "src"), str(single), str(tmp_path / "missing")])
        relative = [Path(p).relative_to(tmp_path).as_posix() for p in collected]
        assert relative == ["src/b.js", "src/a/c.vue", "one.html"]
