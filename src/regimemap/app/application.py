from PySide6.QtCore import QCoreApplication

import sys
from typing import Optional, Sequence

ORG_ID = "cosmic-playground"
APP_ID = "regimemap"


def create_app(argv: Optional[Sequence[str]] = None) -> QCoreApplication:
    """
    Return the running Qt application, or create a headless one.

    The engine only needs an event loop on the caller thread; a GUI
    application created by the host works just as well.
    """
    app = QCoreApplication.instance()
    if app is not None:
        return app

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)

    return QCoreApplication(list(argv) if argv is not None else sys.argv[:1])
