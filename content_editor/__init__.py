"""content_editor public API proxy.

The pure editor modules are loaded explicitly and the symbols listed in their
``__all__`` are forwarded here, so ``import content_editor as ce`` gives access
to the classifier, coercion and all three editors.  The Streamlit UI lives in
``content_editor.tools.editor`` and is not imported here.
"""

from __future__ import annotations

from typing import Dict

from . import classifier as _classifier
from . import coercion as _coercion
from . import config as _config
from . import gallery as _gallery
from . import identity as _identity
from . import media as _media
from . import navigation as _navigation
from . import structured as _structured
from . import utils as _utils
from . import validation as _validation

_MODULES = (
    _utils,
    _validation,
    _config,
    _classifier,
    _coercion,
    _identity,
    _structured,
    _media,
    _gallery,
    _navigation,
)

__all__ = [  # pyright: ignore[reportUnsupportedDunderAll]
    name for module in _MODULES for name in getattr(module, "__all__", [])
]


def _export(module: object, namespace: Dict[str, object]) -> None:
    """Export all symbols from a module's __all__ into the given namespace.

    Args:
        module: Module object to export from.
        namespace: Dictionary (typically globals()) to populate with exported symbols.
    """
    for name in getattr(module, "__all__", []):
        namespace[name] = getattr(module, name)


for _module in _MODULES:
    _export(_module, globals())
