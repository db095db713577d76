"""
Command modules for the apilogs CLI.
"""
