#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard
API трекера задач с аналитикой выполнения и сериями активных дней

Версия: 1.0.0
Дата: 2026-10-18
"""

__version__ = "1.0.0"
