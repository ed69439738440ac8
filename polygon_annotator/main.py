"""Entry point for the polygon annotator."""

import argparse
import logging
import os
from pathlib import Path
import sys

from polygon_annotator.config import load_settings

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Polygon annotator")
    parser.add_argument(
        "image",
        nargs="?",
        default=None,
        help="Optional image file to open on startup.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("POLYGON_ANNOTATOR_LOG_LEVEL", "INFO"),
        help=(
            "Logging level (e.g. DEBUG, INFO). Defaults to "
            "POLYGON_ANNOTATOR_LOG_LEVEL environment variable or INFO."
        ),
    )
    parser.add_argument(
        "--log-file",
        default=os.getenv("POLYGON_ANNOTATOR_LOG_PATH"),
        help=(
            "Optional log file path. Defaults to polygon_annotator_log.txt next "
            "to the executable."
        ),
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Shortcut for --log-level DEBUG",
    )
    return parser.parse_args(argv)


def configure_logging(log_level_name: str, log_path: str | None) -> str:
    resolved_level_name = log_level_name.upper()
    log_level = getattr(logging, resolved_level_name, logging.INFO)

    if not log_path:
        base_dir = os.path.dirname(sys.argv[0])
        log_path = os.path.join(base_dir, "polygon_annotator_log.txt")

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="a", encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
    )

    return log_path


def main() -> None:
    args = parse_args()
    log_level_name = "DEBUG" if args.debug else args.log_level
    log_path = configure_logging(log_level_name, args.log_file)
    logger.info(
        "Starting Polygon Annotator (log level %s, log file %s)",
        log_level_name.upper(),
        log_path,
    )

    from polygon_annotator.ui.main_window import AnnotatorApp, AnnotatorWindow

    settings = load_settings(Path(sys.argv[0]) if sys.argv[0] else None)
    app = AnnotatorApp(sys.argv)
    window = AnnotatorWindow(settings)
    app.window = window
    window.show()
    if args.image:
        window.load_image(Path(args.image))

    def cleanup() -> None:
        try:
            if window:
                window.close()
        except Exception:  # pragma: no cover - best effort
            logger.exception("Unexpected error while closing window")

    app.aboutToQuit.connect(cleanup)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
