"""Streamlit practice UI."""
