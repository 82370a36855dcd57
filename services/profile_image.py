"""
Profile image helpers
---------------------
  - image_path(prefix, user_id, filename, content_type=None)
      "<prefix>/<user_id>.<ext>"; same user + extension -> same path, so
      re-uploads overwrite instead of piling up blobs.
  - cache_busted(url, now_ms)
      appends t=<ms> so clients refetch after the bytes change at a stable URL.
"""
from __future__ import annotations

import mimetypes
import time
from typing import Optional

DEFAULT_EXT = "bin"


def image_extension(filename: str, content_type: Optional[str] = None) -> str:
    name = (filename or "").strip().rsplit("/", 1)[-1]
    if "." in name:
        ext = name.rsplit(".", 1)[-1].strip().lower()
        if ext:
            return ext
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed:
            return guessed.lstrip(".").lower()
    return DEFAULT_EXT


def image_path(prefix: str, user_id: str, filename: str, content_type: Optional[str] = None) -> str:
    ext = image_extension(filename, content_type)
    prefix = (prefix or "").strip("/")
    return f"{prefix}/{user_id}.{ext}" if prefix else f"{user_id}.{ext}"


def now_ms() -> int:
    return int(time.time() * 1000)


def cache_busted(url: str, ts_ms: Optional[int] = None) -> str:
    ts = now_ms() if ts_ms is None else ts_ms
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}t={ts}"
