"""Allow running Lapdown as a module: python -m lapdown."""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import LapdownApp


def main() -> None:
    parser = argparse.ArgumentParser(prog="lapdown", description="Countdown timer with laps.")
    parser.add_argument("--debug", action="store_true", help="log timer transitions")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("Lapdown")
    app.setOrganizationName("Lapdown")

    window = LapdownApp()
    window.show()
    logging.getLogger(__name__).info("Lapdown ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
