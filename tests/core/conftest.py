"""Pytest configuration for core tests."""
import pytest

from tsgraph.core.interface import check_socket


class RecordingNode:
    """
    Minimal Connectable that logs every value it receives.

    Outputs are strings naming the node and socket, so tests can check
    exactly what flowed where.
    """

    def __init__(self, name: str, log: list, inputs: int = 1, outputs: int = 1):
        self.name = name
        self.log = log
        self.inputs = inputs
        self.outputs = outputs
        self.is_valid = True
        self.received = []
        self.recompute_count = 0

    def num_inputs(self):
        return self.inputs

    def num_outputs(self):
        return self.outputs

    def get_input_name(self, index):
        check_socket(index, self.inputs, 'input')
        return f"in{index}"

    def get_output_name(self, index):
        check_socket(index, self.outputs, 'output')
        return f"out{index}"

    def get_allowed_input_types_for(self, socket):
        check_socket(socket, self.inputs, 'input')
        return frozenset({str})

    def get_output_types_for(self, socket):
        check_socket(socket, self.outputs, 'output')
        return frozenset({str})

    def set_input(self, socket, value, source=None):
        check_socket(socket, self.inputs, 'input')
        self.received.append((socket, value, source))
        self.log.append((self.name, socket, value))
        self.recompute()

    def get_output(self, socket):
        check_socket(socket, self.outputs, 'output')
        return f"{self.name}.{socket}"

    def recompute(self):
        self.recompute_count += 1

    def __repr__(self):
        return f"RecordingNode({self.name})"


@pytest.fixture
def call_log():
    """Shared (node name, socket, value) log across RecordingNodes."""
    return []


@pytest.fixture
def make_node(call_log):
    """Factory for RecordingNodes sharing call_log."""

    def _make(name, inputs=1, outputs=1):
        return RecordingNode(name, call_log, inputs=inputs, outputs=outputs)

    return _make
