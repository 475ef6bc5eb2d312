"""
catalog_provider.py - 현재 요율표 보관 및 교체

읽기는 잠금 없이 참조 하나만 읽는다 (RateCatalog는 불변).
교체는 새 요율표를 완전히 만든 뒤 참조만 바꾼다.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import CatalogLoadError
from ..domain.catalog import RateCatalog, load_catalog

logger = logging.getLogger(__name__)


class CatalogProvider:
    """요율표 보관소"""

    def __init__(
        self,
        catalog: RateCatalog,
        source_path: Optional[Union[str, Path]] = None,
        strict: bool = False,
    ):
        self._catalog = catalog
        self.source_path = Path(source_path) if source_path else None
        self.strict = strict
        self._write_lock = threading.Lock()
        self._mtime = self._current_mtime()

    @classmethod
    def from_path(cls, path: Union[str, Path], strict: bool = False) -> "CatalogProvider":
        """파일에서 로드 (실패 시 CatalogLoadError - 기동 중단)"""
        return cls(load_catalog(path, strict=strict), source_path=path, strict=strict)

    @property
    def current(self) -> RateCatalog:
        return self._catalog

    def replace(self, catalog: RateCatalog) -> RateCatalog:
        """요율표 통째로 교체. 이전 요율표 반환"""
        with self._write_lock:
            previous = self._catalog
            self._catalog = catalog
        logger.info(f"Rate catalog replaced: {previous.version} -> {catalog.version}")
        return previous

    def reload(self) -> RateCatalog:
        """원본 파일에서 다시 로드

        Raises:
            CatalogLoadError: 새 데이터가 잘못된 경우 (기존 요율표 유지)
        """
        if self.source_path is None:
            raise CatalogLoadError("No rate file configured for reload")

        with self._write_lock:
            mtime = self._current_mtime()
            try:
                catalog = load_catalog(self.source_path, strict=self.strict)
            except CatalogLoadError:
                logger.error(
                    f"Reload failed, keeping rate catalog {self._catalog.version}",
                    extra={"context": {"source": str(self.source_path)}},
                )
                raise
            previous = self._catalog
            self._catalog = catalog
            self._mtime = mtime

        logger.info(f"Rate catalog reloaded: {previous.version} -> {catalog.version}")
        return catalog

    def reload_if_changed(self) -> bool:
        """파일 수정 시각이 바뀌었으면 다시 로드"""
        if self.source_path is None:
            return False
        if self._current_mtime() == self._mtime:
            return False
        self.reload()
        return True

    def _current_mtime(self) -> Optional[float]:
        if self.source_path is None:
            return None
        try:
            return self.source_path.stat().st_mtime
        except OSError:
            return None
