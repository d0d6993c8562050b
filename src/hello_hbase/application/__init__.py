"""Application layer for the walkthrough.

The application layer drives the column store port through the walkthrough
steps and decides what happens on failure.

Exports:
    - DemoRunner: Runs connect, create, write, read and scan
    - RunResult: Outcome of a run, including the exit code
    - OUTPUT_TAG: Prefix of the progress lines printed to stdout
"""

from hello_hbase.application.demo_runner import OUTPUT_TAG, DemoRunner, RunResult

__all__ = [
    "DemoRunner",
    "RunResult",
    "OUTPUT_TAG",
]
