"""
UAS Bot - Test Suite
"""
