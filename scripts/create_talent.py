"""Add a talent to the directory.

Usage:
  python scripts/create_talent.py --name "Jane Doe" --bio "..." --portfolio-url https://...

Talents have no HTTP create route; this is the out-of-band way in.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from talent_site.config import load_config
from talent_site.db import Database, init_db
from talent_site.store import create_talent


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True)
    ap.add_argument("--bio")
    ap.add_argument("--portfolio-url")
    args = ap.parse_args()

    cfg = load_config()
    if not cfg.DB_DSN:
        raise SystemExit("DATABASE_URL is not set")

    db = Database(cfg.DB_DSN)
    try:
        init_db(db)
        with db.connection() as conn:
            t = create_talent(conn, name=args.name, bio=args.bio, portfolio_url=args.portfolio_url)
    finally:
        db.close()

    print("Created talent:")
    print(t)


if __name__ == "__main__":
    main()
