"""Tests for baseline.manifest module."""

import json
from pathlib import Path

import pytest

from baseline import manifest as manifest_module
from baseline.errors import InvalidVersionFormatError, ManifestParseError, ManifestWriteError
from baseline.manifest import update_manifest

KNOWN_KEYS = ["version", "name", "publisher", "obsoleteTagVersion", "obsoleteTagAllowedVersions"]


def _update(folder: Path, version: str = "24.0.0", repo_version: str = "24.0", max_major: int = 26):
    return update_manifest(folder, "Foo", version, "Microsoft", repo_version, max_major)


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="ascii"))


class TestCreateManifest:
    """Manifest does not exist yet."""

    def test_creates_file_with_all_fields(self, tmp_path):
        path = _update(tmp_path)

        assert path == tmp_path / "AppSourceCop.json"
        assert path.exists()
        assert _read(path) == {
            "version": "24.0.0.0",
            "name": "Foo",
            "publisher": "Microsoft",
            "obsoleteTagVersion": "24.0",
            "obsoleteTagAllowedVersions": "25.0,26.0",
        }

    def test_key_order_is_stable(self, tmp_path):
        path = _update(tmp_path)
        assert list(_read(path).keys()) == KNOWN_KEYS

    def test_four_part_version_kept(self, tmp_path):
        path = _update(tmp_path, version="24.1.18927.0")
        assert _read(path)["version"] == "24.1.18927.0"

    def test_empty_allowed_range(self, tmp_path):
        path = _update(tmp_path, repo_version="26.0", max_major=26)
        assert _read(path)["obsoleteTagAllowedVersions"] == ""

    def test_current_above_max(self, tmp_path):
        path = _update(tmp_path, repo_version="27.0", max_major=26)
        assert _read(path)["obsoleteTagAllowedVersions"] == ""

    def test_no_temp_file_left(self, tmp_path):
        _update(tmp_path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["AppSourceCop.json"]


class TestVersionValidation:
    """Invalid versions never reach the file."""

    def test_two_part_version_rejected(self, tmp_path):
        with pytest.raises(InvalidVersionFormatError):
            _update(tmp_path, version="24.0")
        assert not (tmp_path / "AppSourceCop.json").exists()

    def test_non_numeric_version_rejected(self, tmp_path):
        with pytest.raises(InvalidVersionFormatError):
            _update(tmp_path, version="24.0.x")

    def test_non_numeric_repo_version_rejected(self, tmp_path):
        with pytest.raises(InvalidVersionFormatError):
            _update(tmp_path, repo_version="main")


class TestUpdateExistingManifest:
    """Manifest already exists."""

    def test_overwrites_known_fields(self, tmp_path):
        path = tmp_path / "AppSourceCop.json"
        path.write_text(
            json.dumps(
                {
                    "version": "23.0.0.0",
                    "name": "Old",
                    "publisher": "Someone",
                    "obsoleteTagVersion": "23.0",
                    "obsoleteTagAllowedVersions": "24.0",
                }
            )
        )

        _update(tmp_path)

        assert _read(path)["version"] == "24.0.0.0"
        assert _read(path)["name"] == "Foo"
        assert _read(path)["publisher"] == "Microsoft"
        assert _read(path)["obsoleteTagAllowedVersions"] == "25.0,26.0"

    def test_preserves_unknown_keys_after_known_keys(self, tmp_path):
        path = tmp_path / "AppSourceCop.json"
        path.write_text(
            json.dumps({"mandatoryAffixes": ["Foo"], "version": "1.0.0.0", "supportedCountries": []})
        )

        _update(tmp_path)

        data = _read(path)
        assert data["mandatoryAffixes"] == ["Foo"]
        assert data["supportedCountries"] == []
        assert list(data.keys())[:5] == KNOWN_KEYS

    def test_reads_manifest_with_bom(self, tmp_path):
        path = tmp_path / "AppSourceCop.json"
        path.write_text(json.dumps({"version": "1.0.0.0"}), encoding="utf-8-sig")

        _update(tmp_path)

        assert _read(path)["version"] == "24.0.0.0"

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "AppSourceCop.json"
        path.write_text("{ not json")

        with pytest.raises(ManifestParseError):
            _update(tmp_path)
        assert path.read_text() == "{ not json"

    def test_non_object_json_raises(self, tmp_path):
        (tmp_path / "AppSourceCop.json").write_text("[1, 2, 3]")

        with pytest.raises(ManifestParseError):
            _update(tmp_path)

    def test_non_string_known_values_are_replaced(self, tmp_path):
        path = tmp_path / "AppSourceCop.json"
        path.write_text(
            json.dumps({"version": 1, "name": None, "publisher": {"nested": 1}, "keep": 5})
        )

        _update(tmp_path)

        data = _read(path)
        assert data["version"] == "24.0.0.0"
        assert data["name"] == "Foo"
        assert data["publisher"] == "Microsoft"
        assert data["keep"] == 5

    def test_unreadable_manifest_raises(self, tmp_path):
        (tmp_path / "AppSourceCop.json").mkdir()

        with pytest.raises(ManifestParseError):
            _update(tmp_path)


class TestSerialization:
    """Byte-level properties of the written manifest."""

    def test_idempotent(self, tmp_path):
        path = _update(tmp_path)
        first = path.read_bytes()

        _update(tmp_path)

        assert path.read_bytes() == first

    def test_round_trip(self, tmp_path):
        path = update_manifest(tmp_path, "Bar", "25.1.2", "Contoso", "25.1", 27)

        loaded = manifest_module.load_manifest(path)

        assert loaded.to_json_dict() == {
            "version": "25.1.2.0",
            "name": "Bar",
            "publisher": "Contoso",
            "obsoleteTagVersion": "25.1",
            "obsoleteTagAllowedVersions": "26.0,27.0",
        }

    def test_output_is_ascii(self, tmp_path):
        path = update_manifest(tmp_path, "Fakturaer æøå", "24.0.0", "Microsoft", "24.0", 25)

        raw = path.read_bytes()
        raw.decode("ascii")
        assert json.loads(raw)["name"] == "Fakturaer æøå"


class TestWriteVerification:
    """Post-write existence check."""

    def test_missing_file_after_write_raises(self, tmp_path, monkeypatch):
        monkeypatch.setattr(manifest_module, "atomic_write_text", lambda *args, **kwargs: None)

        with pytest.raises(ManifestWriteError):
            _update(tmp_path)

    def test_write_failure_raises_write_error(self, tmp_path):
        """A folder path that is actually a file cannot hold the manifest."""
        folder = tmp_path / "not-a-dir"
        folder.write_text("")

        with pytest.raises(ManifestWriteError, match="could not be written"):
            _update(folder)
