"""Layout, numerics, configuration and exceptions"""
