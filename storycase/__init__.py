"""
Storycase: turns user stories and tracker issues into structured test
cases with a generative language model. api/, core/, providers/,
schemas/, services/ and utils/ make up the service; client/ holds the
issue browser, generation orchestrator and test case table state.
"""
from .main import create_app

__all__ = ["__version__", "create_app"]
__version__ = "0.1.0"
