import os
import sys
import glob
import logging
import tempfile
from logging.handlers import RotatingFileHandler


class PrivateRotatingFileHandler(RotatingFileHandler):
    """
    RotatingFileHandler writing into a per-user temp directory.
    A previous run's directory with the same prefix is reused when it is still private.
    """

    def __init__(self, tmpdir_prefix='', basename='permscan.log', **kwargs):
        self.base_dir = self._find_temp_dir(tmpdir_prefix)
        super().__init__(os.path.join(self.base_dir, basename), **kwargs)

    @staticmethod
    def _tmpdir_usable(path):
        try:
            st = os.stat(path, follow_symlinks=False)
        except OSError:
            return False
        if st.st_uid != os.getuid() or (st.st_mode & 0o777) != 0o700:
            return False
        return not any(os.path.islink(os.path.join(path, item)) for item in os.listdir(path))

    @classmethod
    def _find_temp_dir(cls, tmpdir_prefix):
        if tmpdir_prefix:
            pattern = os.path.join(tempfile.gettempdir(), f"{tmpdir_prefix}*")
            for dir_ in sorted(glob.glob(pattern)):
                if os.path.isdir(dir_) and cls._tmpdir_usable(dir_):
                    return dir_

        # mkdtemp already creates it 0o700
        return tempfile.mkdtemp(prefix=tmpdir_prefix)


def setup_logger(prefix, name=None, level=logging.INFO, log_file=True):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    if log_file:
        handler = PrivateRotatingFileHandler(tmpdir_prefix=prefix + '.', basename=f"log_{os.getpid()}.log",
            maxBytes=10*(1024 ** 2), backupCount=3)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(stderr_handler)
    return logger
