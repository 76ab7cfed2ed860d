"""Flour mill services"""
