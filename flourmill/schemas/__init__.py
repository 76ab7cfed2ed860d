"""Pydantic response schemas"""
