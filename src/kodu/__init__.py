"""
kodu: project file discovery for context bundling, comment stripping,
and diff filtering.
"""
