"""Relay test suite"""
