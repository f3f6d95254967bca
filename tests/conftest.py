import pytest

from pluglisp.interpreter import Interpreter


@pytest.fixture
def interp():
    """Fresh interpreter with every default plugin loaded."""
    interpreter = Interpreter()
    yield interpreter
    interpreter.shutdown()


@pytest.fixture
def run(interp):
    """Evaluate source text and return the display form of the result."""
    def _run(source: str) -> str:
        return str(interp.eval(source))
    return _run
