"""
Package: processing
Description: Worker loop that consumes work items from a Queue.
"""

from workqueue.processing.processor import Handler, Outcome, Processor

__all__ = ["Handler", "Outcome", "Processor"]
