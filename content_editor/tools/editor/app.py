"""Streamlit-based editor for one content entry."""

from __future__ import annotations

import os
import sys

import streamlit as st

from content_editor.media import collect_media
from content_editor.tools.editor.fields import render_fields
from content_editor.tools.editor.framework import entry_title, get_config, init_state, setup_logging, sidebar


st.set_page_config(
    layout="wide",
    page_title="Content Editor",
    initial_sidebar_state="expanded",
)


def media_overview() -> None:
    """Every media URL referenced by the entry."""
    content_type = st.session_state.get("content_type")
    field_defs = content_type.field_map() if content_type is not None else None
    refs = collect_media(st.session_state["values"], field_defs)
    if not refs:
        return
    with st.expander(f"Media in this entry ({len(refs)})"):
        for ref in refs:
            st.markdown(f"- **{ref.label}** ({ref.kind}) `{ref.key}`: {ref.url}")


def main() -> None:
    """Main entry point for the entry editor."""
    if len(sys.argv) < 2:
        st.error("Usage: content-editor <entry.json> [content_type.json] [media.json]")
        st.info("Please provide the path to the content entry you want to edit.")
        st.stop()

    config = get_config()
    setup_logging(config)

    if "values" not in st.session_state:
        init_state(*sys.argv[1:4])

    sidebar()

    st.title(entry_title() or os.path.basename(sys.argv[1]))
    st.caption(os.path.basename(st.session_state["entry_path"]))

    read_only = st.toggle("Preview", value=False, key="read_only", help="Show values without controls")
    render_fields(st.session_state.get("content_type"), read_only=read_only)
    media_overview()


if __name__ == "__main__":
    main()
