"""Streamlit entry editor: field dispatch, the three value editors, media picker."""
