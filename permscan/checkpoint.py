"""
Line oriented key=value store used to checkpoint scan progress.

    current_index=123456789012345678901234567890

Values are kept as text so arbitrarily large integers survive a round trip.
"""
import os
import re
import tempfile
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STORE = Path("data") / "store.txt"

_MISSING = object()


def _check_key(key):
    if not key or not key.strip():
        raise ValueError("Key cannot be empty")
    if re.search(r"[=\r\n]", key):
        raise ValueError('Key cannot contain "=", carriage return, or newline characters')


def _line_pattern(key):
    return re.compile(rf"^{re.escape(key)}=(.*)$", re.MULTILINE)


def _append_entry(content, entry):
    if content and not content.endswith("\n"):
        content += "\n"
    return content + entry


def _write_atomic(path, content):
    # the store holds either the old or the new content, never a truncated file
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def update_key_value(key, value, file_path=DEFAULT_STORE):
    """
    Sets `key` to `value`, replacing the existing entry or appending a new one.
    Parent directories are created as needed.
    """
    try:
        _check_key(key)
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        entry = f"{key}={value}"
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            content = ""

        pattern = _line_pattern(key)
        if pattern.search(content):
            content = pattern.sub(lambda m: entry, content, count=1)
        else:
            content = _append_entry(content, entry)

        _write_atomic(path, content)
    except (OSError, ValueError) as e:
        logger.error(f"Error updating {key}: {e}")
        raise


def get_value(key, file_path=DEFAULT_STORE, default=_MISSING, create_if_missing=False, strip=True):
    """
    Returns the text stored under `key`.

    When the file or the key is missing, `default` (stringified) is returned if given,
    and written to the store first if `create_if_missing` is set.
    Without a default a missing file raises FileNotFoundError and a missing key KeyError.
    """
    _check_key(key)
    path = Path(file_path)

    if not path.exists():
        if default is _MISSING:
            raise FileNotFoundError(f"File not found: {path}")
        if create_if_missing:
            path.parent.mkdir(parents=True, exist_ok=True)
            _write_atomic(path, f"{key}={default}")
            logger.info(f"Created file {path} with {key}={default}")
        else:
            logger.info(f"File {path} not found, returning default value for {key}")
        return str(default)

    content = path.read_text(encoding="utf-8")
    match = _line_pattern(key).search(content)
    if match:
        value = match.group(1)
        return value.strip() if strip else value

    if default is _MISSING:
        raise KeyError(f"Key not found: {key}")

    if create_if_missing:
        _write_atomic(path, _append_entry(content, f"{key}={default}"))
        logger.info(f"Added {key}={default} to {path}")
    return str(default)


def get_value_as_int(key, file_path=DEFAULT_STORE, **kwargs):
    value = get_value(key, file_path, **kwargs).strip()
    # older stores marked big integers with a trailing 'n'
    if value.endswith("n"):
        value = value[:-1]
    return int(value)


def get_value_as_bool(key, file_path=DEFAULT_STORE, **kwargs):
    return get_value(key, file_path, **kwargs).strip().lower() == "true"
