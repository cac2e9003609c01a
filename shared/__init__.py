"""Pydantic схемы API, общие для роутеров и аналитики"""
