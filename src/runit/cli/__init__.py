"""
runit command line.

Usage::

    runit serve --kubeconfig ~/.kube/config
    runit serve --in-cluster
    runit submit job.yaml --dry-run
    runit ping
"""

from runit.cli.app import app

__all__ = ["app"]
