"""catalog_provider.py 테스트 - 요율표 교체"""

import json
import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitability.core.exceptions import CatalogLoadError
from profitability.domain.catalog import build_catalog
from profitability.services.catalog_provider import CatalogProvider

from conftest import scenario_data


def write_catalog(path: Path, version: str, mtime: float = None):
    data = scenario_data()
    data["version"] = version
    path.write_text(json.dumps(data), encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))


class TestCatalogProvider:
    """CatalogProvider 테스트"""

    def test_current(self):
        catalog = build_catalog(scenario_data())
        provider = CatalogProvider(catalog)
        assert provider.current is catalog

    def test_replace_returns_previous(self):
        old = build_catalog(scenario_data())
        data = scenario_data()
        data["version"] = "test-2"
        new = build_catalog(data)

        provider = CatalogProvider(old)
        previous = provider.replace(new)

        assert previous is old
        assert provider.current is new

    def test_snapshot_unaffected_by_replace(self):
        """교체 전에 받은 요율표는 그대로"""
        provider = CatalogProvider(build_catalog(scenario_data()))
        snapshot = provider.current
        data = scenario_data()
        data["version"] = "test-2"
        provider.replace(build_catalog(data))
        assert snapshot.version == "test-1"

    def test_reload_without_source(self):
        provider = CatalogProvider(build_catalog(scenario_data()))
        with pytest.raises(CatalogLoadError):
            provider.reload()
        assert provider.reload_if_changed() is False


class TestReloadFromFile:
    """파일 기반 다시 로드"""

    def test_from_path(self, tmp_path):
        path = tmp_path / "rates.json"
        write_catalog(path, "v1")
        provider = CatalogProvider.from_path(path)
        assert provider.current.version == "v1"

    def test_from_bad_path_refuses_to_start(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(CatalogLoadError):
            CatalogProvider.from_path(path)

    def test_reload(self, tmp_path):
        path = tmp_path / "rates.json"
        write_catalog(path, "v1")
        provider = CatalogProvider.from_path(path)

        write_catalog(path, "v2")
        catalog = provider.reload()

        assert catalog.version == "v2"
        assert provider.current is catalog

    def test_failed_reload_keeps_old_catalog(self, tmp_path):
        path = tmp_path / "rates.json"
        write_catalog(path, "v1")
        provider = CatalogProvider.from_path(path)
        old = provider.current

        path.write_text("{ broken", encoding="utf-8")
        with pytest.raises(CatalogLoadError):
            provider.reload()

        assert provider.current is old

    def test_strict_reload_rejects_gaps(self, tmp_path):
        path = tmp_path / "rates.json"
        write_catalog(path, "v1")
        provider = CatalogProvider(build_catalog(scenario_data()), source_path=path, strict=True)
        with pytest.raises(CatalogLoadError):
            provider.reload()
        assert provider.current.version == "test-1"

    def test_reload_if_changed(self, tmp_path):
        path = tmp_path / "rates.json"
        write_catalog(path, "v1", mtime=1_700_000_000)
        provider = CatalogProvider.from_path(path)

        assert provider.reload_if_changed() is False

        write_catalog(path, "v2", mtime=1_700_000_100)
        assert provider.reload_if_changed() is True
        assert provider.current.version == "v2"
        assert provider.reload_if_changed() is False
