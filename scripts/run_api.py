import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from talent_site.config import load_config


def main() -> None:
    cfg = load_config()
    uvicorn.run("talent_site.api.server:app", host=cfg.HOST, port=cfg.PORT, reload=False)


if __name__ == "__main__":
    main()
