"""
Studies: Headless runs for watching a flock behave.

Each study starts from a config, runs a fixed number of frames,
and reports what the flock did. No rendering.
"""
