import argparse
import logging
from pathlib import Path

from tome.config import apply_overrides, load_config
from tome.web import app


def main() -> None:
    parser = argparse.ArgumentParser(description="tome: a versioned Markdown wiki")
    parser.add_argument("--config", default="tome.yaml", help="Path to YAML config")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--content-dir", type=Path)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = apply_overrides(load_config(Path(args.config)), args)
    app.main(config)


main()
