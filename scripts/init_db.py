import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from talent_site.config import load_config
from talent_site.db import Database, init_db


def main() -> None:
    cfg = load_config()
    if not cfg.DB_DSN:
        raise SystemExit("DATABASE_URL is not set")

    db = Database(cfg.DB_DSN)
    try:
        init_db(db)
    finally:
        db.close()

    print(f"DB initialized ({db.dialect})")


if __name__ == "__main__":
    main()
