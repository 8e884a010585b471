"""
Operational plumbing: logging, signals, child process supervision.
"""
