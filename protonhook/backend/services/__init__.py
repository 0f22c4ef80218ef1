"""
Backend services composing the Steam library handlers into the two public operations.
"""
