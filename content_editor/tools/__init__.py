"""Streamlit tools shipped with content_editor."""
