"""section-audit core library.

Only ``runner.fix_files``, ``config.write_default_config`` and the I/O
helpers in ``utils`` write files; the section pipeline works on strings.
"""

from . import exceptions  # noqa: F401

__all__ = ["exceptions"]
