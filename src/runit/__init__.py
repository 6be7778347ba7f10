"""
runit - submit batch Jobs to Kubernetes and supervise them to cleanup.

Packages:
    runit.core       settings, structured logging, error hierarchy
    runit.execution  job lifecycle supervisor and orchestrator adapters
    runit.api        FastAPI app exposing the submission endpoint
    runit.cli        Typer command line (serve, submit, ping)
"""

__version__ = "0.1.0"
