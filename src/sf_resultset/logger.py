import logging

PACKAGE = "sf_resultset"

pkg_root = logging.getLogger(PACKAGE)
# silent unless the application configures logging
pkg_root.addHandler(logging.NullHandler())


def getLogger(name: str | None = None) -> logging.Logger:
    """
    Logger for a part of the package.

    Accepts a short suffix (``"result"``) or a module ``__name__``
    (``"sf_resultset.io.api"``); both resolve under the package root.
    """
    if not name or name == PACKAGE:
        return pkg_root
    return pkg_root.getChild(name.removeprefix(PACKAGE + "."))
