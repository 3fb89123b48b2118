from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional
from PyQt6.QtCore import QSettings
import logging

logger = logging.getLogger(__name__)


def _to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class ScanSettings:
    word_file: Optional[Path] = None
    k: int = 12
    count: int = 5000
    checkpoint_file: Path = Path("data") / "store.txt"
    checkpoint_key: str = "current_index"
    matches_file: Optional[Path] = None
    language: str = "english"
    log_every: int = 1000
    lazy: bool = False

    def override(self, **values):
        """Copy with every value that is not None replacing the current one."""
        return replace(self, **{key: value for key, value in values.items() if value is not None})


_CONVERTERS = {
    "word_file": Path,
    "k": int,
    "count": int,
    "checkpoint_file": Path,
    "checkpoint_key": str,
    "matches_file": Path,
    "language": str,
    "log_every": int,
    "lazy": _to_bool,
}


def load_settings(path=None, settings=None):
    """
    Reads the [scan] group of an INI file. Keys absent from the file keep their defaults.
    """
    result = ScanSettings()
    if settings is None:
        if path is None:
            return result
        if not Path(path).exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        settings = QSettings(str(path), QSettings.Format.IniFormat)

    values = {}
    settings.beginGroup("scan")
    for field in fields(ScanSettings):
        if settings.contains(field.name):
            raw = settings.value(field.name)
            if isinstance(raw, list):
                settings.endGroup()
                raise ValueError(f"Invalid value for {field.name}: {','.join(raw)!r} "
                                 "holds a comma, quote it in the INI file")
            try:
                values[field.name] = _CONVERTERS[field.name](raw)
            except (TypeError, ValueError) as e:
                settings.endGroup()
                raise ValueError(f"Invalid value for {field.name}: {raw!r}") from e
    settings.endGroup()

    logger.debug(f"load_settings: {values}")
    return result.override(**values)


def save_settings(scan_settings, path):
    settings = QSettings(str(path), QSettings.Format.IniFormat)
    settings.beginGroup("scan")
    for field in fields(ScanSettings):
        value = getattr(scan_settings, field.name)
        if value is None:
            settings.remove(field.name)
        else:
            settings.setValue(field.name, str(value))
    settings.endGroup()
    settings.sync()
