"""Textual UI for zenreview"""
