"""
protonhook CLI frontend.
"""
