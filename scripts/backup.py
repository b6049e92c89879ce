"""Backup database.

SQLite: timestamped copy of the database file, optionally zip-compressed.
MySQL: uses `mysqldump` (must be installed on the machine).
"""

from __future__ import annotations

import argparse
import shutil
import subprocess
import zipfile
from datetime import datetime
from pathlib import Path

import _bootstrap  # noqa: F401
from sqlalchemy.engine import make_url

from punchclock.main import load_settings


def backup_sqlite(db_file: Path, out_dir: Path, *, ts: str, compress: bool) -> Path:
    if not db_file.exists():
        raise SystemExit(f"Database file not found: {db_file}")

    out_file = out_dir / f"{db_file.stem}_{ts}{db_file.suffix}"
    shutil.copy2(db_file, out_file)
    if not compress:
        return out_file

    zip_file = out_file.with_suffix(out_file.suffix + ".zip")
    with zipfile.ZipFile(zip_file, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.write(out_file, arcname=out_file.name)
    out_file.unlink()
    return zip_file


def backup_mysql(url, out_dir: Path, *, ts: str) -> Path:
    out_file = out_dir / f"{url.database}_{ts}.sql"
    cmd = [
        "mysqldump",
        f"-h{url.host or 'localhost'}",
        f"-P{url.port or 3306}",
        f"-u{url.username}",
        f"-p{url.password or ''}",
        url.database,
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools.")
    return out_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Back up the punchclock database.")
    parser.add_argument("--zip", action="store_true", help="compress the SQLite copy")
    parser.add_argument("--out", default=None, help="output directory (default: <repo>/backups)")
    args = parser.parse_args()

    settings = load_settings()
    url = make_url(str(settings["DATABASE_URL"]))

    out_dir = Path(args.out) if args.out else _bootstrap.REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if url.get_backend_name() == "sqlite":
        out_file = backup_sqlite(Path(url.database or ""), out_dir, ts=ts, compress=args.zip)
    else:
        out_file = backup_mysql(url, out_dir, ts=ts)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
