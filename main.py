# main.py
import logging
import os
import sys

from livechart import config


def _add_qt_bin_to_path():
    # Windows uniquement : rend les DLL Qt trouvables
    if not hasattr(os, "add_dll_directory"):
        return
    try:
        from PyQt6.QtCore import QLibraryInfo
        bin_path = QLibraryInfo.path(QLibraryInfo.LibraryPath.BinariesPath)
        if bin_path:
            os.add_dll_directory(bin_path)
            logging.getLogger(__name__).info("Qt bin added to DLL search path: %s", bin_path)
    except OSError as e:
        logging.getLogger(__name__).warning("add_dll_directory failed: %s", e)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    _add_qt_bin_to_path()

    from PyQt6.QtWidgets import QApplication
    app = QApplication(sys.argv)

    # Crée et montre la fenêtre (la session démarre au premier tour de boucle)
    from livechart.ui.main_window import MainWindow
    win = MainWindow()
    win.show()

    # Catch global exceptions (ex: STRICT_INVARIANTS) : on coupe le feed puis on sort
    def _excepthook(t, v, tb):
        logging.getLogger(__name__).critical("exception non gérée", exc_info=(t, v, tb))
        try:
            win.stop_feed()
        finally:
            sys.exit(1)
    sys.excepthook = _excepthook

    exit_code = 0
    try:
        exit_code = app.exec()
    finally:
        win.stop_feed()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
