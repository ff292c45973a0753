"""execmany: batch command fan-out workflow step for media packages.

Runs a command once per matching media package element on an execution
service, waits for every job, inspects produced tracks, and folds the
results back into the package or into workflow properties.
"""

__version__ = "0.1.0"
