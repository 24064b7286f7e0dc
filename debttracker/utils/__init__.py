"""Shared helpers, form fields and decorators"""
