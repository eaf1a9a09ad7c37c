"""
Tests for FlowDefaults configuration, construction and per-name payload
defaults.
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flowtreelib import (
    Direction,
    EventDispatcher,
    Flow,
    FlowDefaults,
    InvalidConfigError,
    StatsDefaults,
    construct,
    defaults_for,
)


class TestFlowDefaults(unittest.TestCase):
    """FlowDefaults validation and copying."""

    def test_default_values(self):
        defaults = FlowDefaults()
        self.assertIsNone(defaults.factory)
        self.assertEqual(defaults.behaviours, [])
        self.assertIs(defaults.direction, Direction.DOWNSTREAM)
        self.assertEqual(defaults.validate(), [])

    def test_presets(self):
        self.assertIs(FlowDefaults.upstream().direction, Direction.UPSTREAM)
        self.assertIs(FlowDefaults.silent().direction, Direction.NONE)

        behaviour = lambda flow, defaults: None
        self.assertEqual(FlowDefaults.upstream(behaviours=[behaviour]).behaviours, [behaviour])

    def test_copy_is_independent(self):
        original = FlowDefaults(behaviours=[lambda flow, defaults: None])
        copied = original.copy()

        copied.behaviours.append(lambda flow, defaults: None)
        copied.direction = Direction.CURRENT

        self.assertEqual(len(original.behaviours), 1)
        self.assertIs(original.direction, Direction.DOWNSTREAM)

    def test_validate_reports_every_problem(self):
        defaults = FlowDefaults(factory=5, behaviours=[print, 'nope'], direction='down')

        errors = defaults.validate()

        self.assertIn("factory must be callable", errors)
        self.assertIn("behaviour at index 1 is not callable", errors)
        self.assertTrue(any(e.startswith("direction must be a Direction") for e in errors))
        self.assertEqual(len(errors), 3)

    def test_validate_behaviours_type(self):
        errors = FlowDefaults(behaviours='abc').validate()
        self.assertEqual(errors, ["behaviours must be a list of callables"])

    def test_invalid_defaults_rejected_by_flow(self):
        with self.assertRaises(InvalidConfigError) as ctx:
            Flow('root', defaults=FlowDefaults(direction='up'))

        self.assertEqual(len(ctx.exception.errors), 1)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_flow_copies_defaults(self):
        defaults = FlowDefaults()
        root = Flow('root', defaults=defaults, dispatcher=EventDispatcher())

        self.assertIsNot(root.defaults, defaults)
        defaults.direction = Direction.NONE
        self.assertIs(root.defaults.direction, Direction.DOWNSTREAM)


class TestConstruct(unittest.TestCase):
    """The node factory collaborator."""

    def test_construct_builds_unattached_flow(self):
        dispatcher = EventDispatcher()
        flow = construct(FlowDefaults(), 'node', 'data', dispatcher=dispatcher)

        self.assertIsInstance(flow, Flow)
        self.assertEqual((flow.name, flow.data), ('node', 'data'))
        self.assertIsNone(flow.parent)
        self.assertIs(flow.dispatcher, dispatcher)

    def test_construct_uses_factory(self):
        built = []

        def factory(name, data, *, defaults, dispatcher):
            flow = Flow(name, data, defaults=defaults, dispatcher=dispatcher)
            built.append(flow)
            return flow

        flow = construct(FlowDefaults(factory=factory), 'node', dispatcher=EventDispatcher())

        self.assertEqual(built, [flow])

    def test_behaviours_receive_node_defaults(self):
        received = []
        defaults = FlowDefaults(behaviours=[lambda flow, d: received.append(d)])

        flow = construct(defaults, 'node', dispatcher=EventDispatcher())

        self.assertEqual(received, [flow.defaults])


class TestStatsDefaults(unittest.TestCase):
    """Per-name default payloads."""

    def test_table_operations(self):
        table = StatsDefaults({'a': 1})
        table.set('b', 2)

        self.assertIn('a', table)
        self.assertEqual(len(table), 2)
        self.assertEqual(table.get('b'), 2)
        self.assertIsNone(table.get('c'))
        self.assertEqual(sorted(table.items()), [('a', 1), ('b', 2)])

        table.remove('a')
        table.remove('missing')
        self.assertNotIn('a', table)

    def test_defaults_for_returns_deep_copy(self):
        root = Flow('root', dispatcher=EventDispatcher())
        template = {'nested': {'values': [1]}}
        root.child_defaults.set('counter', template)

        payload = defaults_for(root, 'counter')
        payload['nested']['values'].append(2)

        self.assertEqual(template, {'nested': {'values': [1]}})
        self.assertIsNone(defaults_for(root, 'other'))

    def test_defaults_for_explicit_none_payload(self):
        root = Flow('root', dispatcher=EventDispatcher())
        root.child_defaults.set('empty', None)
        self.assertIsNone(defaults_for(root, 'empty'))

    def test_table_changes_do_not_touch_existing_children(self):
        root = Flow('root', dispatcher=EventDispatcher())
        root.child_defaults.set('counter', {'count': 0})
        counter = root.create('counter')

        root.child_defaults.set('counter', {'count': 100})

        self.assertEqual(counter.data, {'count': 0})


if __name__ == '__main__':
    unittest.main()
