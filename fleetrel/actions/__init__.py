"""GitHub Actions platform primitives: runner context, inputs and outputs."""

from .context import LoadedEvent, RunnerContext, load_event, parse_event
from .inputs import get_boolean_input, get_input
from .outputs import GithubOutputFile, MemoryOutputs, OutputSink, output_sink

__all__ = [
    # context
    "LoadedEvent",
    "RunnerContext",
    "load_event",
    "parse_event",
    # inputs
    "get_boolean_input",
    "get_input",
    # outputs
    "GithubOutputFile",
    "MemoryOutputs",
    "OutputSink",
    "output_sink",
]
