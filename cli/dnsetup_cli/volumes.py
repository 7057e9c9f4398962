from __future__ import annotations

import os
from pathlib import Path

REDIS_OWNER = (999, 1000)
CERTBOT_OWNER = (1000, 1000)


def chown_recursive(path: Path, uid: int, gid: int) -> int:
    """``chown -R uid:gid path`` without following symlinks. Returns the entry count."""
    count = 0
    os.lchown(path, uid, gid)
    count += 1
    for dirpath, dirnames, filenames in os.walk(path):
        for name in (*dirnames, *filenames):
            os.lchown(os.path.join(dirpath, name), uid, gid)
            count += 1
    return count


def fix_volume_permissions(volumes: dict[Path, tuple[int, int]]) -> list[Path]:
    fixed: list[Path] = []
    for path, (uid, gid) in volumes.items():
        if not path.is_dir():
            continue
        chown_recursive(path, uid, gid)
        fixed.append(path)
    return fixed
