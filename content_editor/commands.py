"""CLI Commands
-------------

Console entry points shipped with the package:

- ``content-editor`` launches the Streamlit entry editor
- ``content-editor-describe`` prints how each field of an entry would be edited
"""

__all__ = [
    "streamlit_fn_factory",
    "run_editor",
    "describe_fields",
    "describe_entry",
]

# Keep this list minimal as this py will actually be executed
import os
import sys
from typing import Any, Callable, Mapping


# --------------------------------------------------------
#          ENTRY EDITOR
# --------------------------------------------------------
# Run the editor Streamlit app from anywhere with the `content-editor` command.
def streamlit_fn_factory(relpath: str, curpath: str) -> Callable[[], None]:
    """Create a function that runs a Streamlit app at the given path.

    Args:
        relpath: Relative path to the Streamlit app file.
        curpath: Current directory path where the app should be run from.

    Returns:
        A callable that executes the Streamlit app when called.
    """

    def _run_streamlit_fn_fn() -> None:
        import subprocess

        filename = os.path.join(curpath, relpath)

        subprocess.run(["streamlit", "run", filename] + sys.argv[1:])

    return _run_streamlit_fn_fn


run_editor = streamlit_fn_factory("./tools/editor/app.py", os.path.dirname(__file__))


# --------------------------------------------------------
#          DESCRIBE ENTRY
# --------------------------------------------------------
def describe_fields(
    values: Mapping[str, Any],
    content_type: Any = None,  # noqa: ANN401
    config: Any = None,  # noqa: ANN401
) -> list[tuple[str, str, str]]:
    """Classification and chosen editor for every field.

    Args:
        values: Field-name -> value map of one entry.
        content_type: Optional `ContentType` supplying hints.
        config: Optional `EditorConfig`; defaults apply otherwise.

    Returns:
        ``(field name, classification, editor)`` rows, declared fields first.
    """
    from content_editor.classifier import classify, select_editor
    from content_editor.config import DEFAULT_CONFIG

    config = config or DEFAULT_CONFIG
    field_map = content_type.field_map() if content_type is not None else {}
    api_id = content_type.api_id if content_type is not None else None

    names = list(field_map) + [k for k in values if k not in field_map]
    rows = []
    for name in names:
        value = values.get(name)
        fd = field_map.get(name)
        hint = fd.type if fd is not None else None
        rows.append(
            (name, classify(value, hint, config).value, select_editor(name, value, fd, api_id, config).value)
        )
    return rows


def describe_entry() -> None:
    """CLI entry point: ``content-editor-describe <entry.json> [content_type.json]``."""
    if len(sys.argv) < 2:
        print("Requires one parameter: <entry json file>")
        print("Additional parameter is <content type json file>")
        sys.exit()

    from content_editor.utils import read_json
    from content_editor.validation import ContentEntry, ContentType

    entry = ContentEntry.model_validate(read_json(sys.argv[1]))
    content_type = ContentType.model_validate(read_json(sys.argv[2])) if len(sys.argv) > 2 else None

    print(f"{entry.display_title()} [{entry.status}]")
    rows = describe_fields(entry.values, content_type)
    width = max((len(name) for name, _, _ in rows), default=0)
    for name, classification, editor in rows:
        print(f"  {name.ljust(width)}  {classification:<20} -> {editor}")
