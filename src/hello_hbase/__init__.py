"""
Hello HBase - Column Store Walkthrough

Connects to an HBase cluster through its Thrift gateway, creates a table with
two column families, writes a few greetings, reads one back, scans them all
and cleans up after itself when something goes wrong.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
