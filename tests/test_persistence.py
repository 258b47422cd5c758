"""
Tests for huespack/core/persistence.py - .hcat catalog snapshots.
"""

from pathlib import Path

import msgpack
import pytest

from huespack.core.models import PackCatalog, SongRecord, TrackType
from huespack.core.pack import InitErrorKind, ResourcePack
from huespack.core.persistence import CatalogFile


class TestCatalogFile:
    def test_snapshot_rehydrates_pack(self, sample_pack: Path, tmp_path: Path) -> None:
        original = ResourcePack(sample_pack)
        assert original.init()

        written = CatalogFile.save(original.catalog(), tmp_path / "snap" / "pack")
        assert written.suffix == ".hcat"
        assert written.exists()

        catalog = CatalogFile.load(written)
        assert catalog == original.catalog()

        restored = ResourcePack(sample_pack)
        assert restored.init_from_catalog(catalog)
        alpha = restored.find_song("Alpha")
        assert alpha.get_beatmap(TrackType.BUILDUP) == "..+."
        assert restored.info.author == "Someone"

    def test_init_from_catalog_once_only(self, sample_pack: Path) -> None:
        pack = ResourcePack(sample_pack)
        assert pack.init()
        result = pack.init_from_catalog(PackCatalog())
        assert result.error_kind is InitErrorKind.ALREADY_INITIALIZED

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(IOError, match="not found"):
            CatalogFile.load(tmp_path / "missing.hcat")

    def test_rejects_other_versions(self, tmp_path: Path) -> None:
        path = tmp_path / "old.hcat"
        path.write_bytes(msgpack.packb({"version": "0.9", "songs": []}, use_bin_type=True))
        with pytest.raises(ValueError, match="Incompatible catalog version"):
            CatalogFile.load(path)

    def test_rejects_non_map(self, tmp_path: Path) -> None:
        path = tmp_path / "list.hcat"
        path.write_bytes(msgpack.packb([1, 2, 3]))
        with pytest.raises(ValueError, match="expected a map"):
            CatalogFile.load(path)

    def test_song_without_bpm_round_trips_as_none(self) -> None:
        catalog = PackCatalog(songs=(SongRecord(name="loop1", title="T"),))
        assert PackCatalog.from_dict(catalog.to_dict()).songs[0].bpm is None
