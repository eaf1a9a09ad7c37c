"""Testing utilities for FlowTreeLib consumers."""

from .fixtures import RecordingDispatcher, assert_tree_consistent

__all__ = ['RecordingDispatcher', 'assert_tree_consistent']
