"""
Tests for the modpack manifest model.
"""

import json

import pytest

from modpack_installer.exceptions import ManifestParseError
from modpack_installer.models import ExternalEntry, Manifest, parse_manifest


class TestParseManifest:
    def test_parse_full_manifest(self, manifest_bytes):
        manifest = parse_manifest(manifest_bytes)

        assert manifest.name == "Gamin"
        assert manifest.target == "1.19.4"
        assert manifest.fabric == "0.14.19"
        assert manifest.folder == "1.19.4-gamin"
        assert manifest.mods == ("P7dR8mSH",)
        assert manifest.external == (
            ExternalEntry(url="https://crepe.moe/c/1", file="config/crepe.moe"),
        )

    def test_parse_accepts_str_and_bom(self, manifest_dict):
        text = json.dumps(manifest_dict)
        assert parse_manifest(text) == parse_manifest(b"\xef\xbb\xbf" + text.encode())

    def test_missing_mods_and_external_default_to_empty(self, manifest_dict):
        del manifest_dict["mods"]
        del manifest_dict["external"]

        manifest = parse_manifest(json.dumps(manifest_dict))

        assert manifest.mods == ()
        assert manifest.external == ()

    def test_mods_keep_order_and_duplicates(self, manifest_dict):
        manifest_dict["mods"] = ["b", "a", "b"]
        assert parse_manifest(json.dumps(manifest_dict)).mods == ("b", "a", "b")

    @pytest.mark.parametrize("field", ["target", "loader", "folder"])
    def test_missing_required_field(self, manifest_dict, field):
        del manifest_dict[field]

        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(json.dumps(manifest_dict))
        assert exc_info.value.context["field"] == field

    @pytest.mark.parametrize("field", ["target", "loader", "folder"])
    def test_empty_required_field(self, manifest_dict, field):
        manifest_dict[field] = ""

        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(json.dumps(manifest_dict))
        assert exc_info.value.context["field"] == field

    def test_invalid_json(self):
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(b"{not json")
        assert exc_info.value.code == "E111"

    def test_top_level_must_be_object(self):
        with pytest.raises(ManifestParseError):
            parse_manifest(b"[]")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("mods", "P7dR8mSH"),
            ("mods", [1, 2]),
            ("external", {"url": "x", "file": "y"}),
            ("external", ["https://example.com"]),
            ("external", [{"url": "https://example.com"}]),
            ("target", 1194),
            ("name", None),
        ],
    )
    def test_wrong_shape(self, manifest_dict, field, value):
        manifest_dict[field] = value
        with pytest.raises(ManifestParseError):
            parse_manifest(json.dumps(manifest_dict))

    def test_round_trip(self, manifest_dict):
        manifest_dict["external"].append(
            {"url": "https://example.com/s.zip", "file": "s.zip", "extract": "shaderpacks"}
        )
        manifest = parse_manifest(json.dumps(manifest_dict))

        assert parse_manifest(manifest.to_json()) == manifest
        assert Manifest.from_dict(manifest.to_dict()) == manifest


class TestExternalEntry:
    def test_is_archive_requires_zip_and_extract(self):
        assert ExternalEntry("u", "pack.zip", extract="shaderpacks").is_archive
        assert not ExternalEntry("u", "pack.zip").is_archive
        assert not ExternalEntry("u", "pack.jar", extract="mods").is_archive

    def test_manifest_is_immutable(self, manifest_bytes):
        manifest = parse_manifest(manifest_bytes)
        with pytest.raises(AttributeError):
            manifest.folder = "other"
