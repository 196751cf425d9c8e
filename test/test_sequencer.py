import pytest

from chalicelib.sequencer import Step, run_steps
from chalicelib.utils.exceptions import DownstreamError


def failing(message):
    def action():
        raise DownstreamError(message)
    return action


def test_steps_run_in_order():
    executed = []
    warnings = run_steps('test', [
        Step('first', lambda: executed.append('first')),
        Step('second', lambda: executed.append('second'), fatal=True),
        Step('third', lambda: executed.append('third')),
    ])
    assert executed == ['first', 'second', 'third']
    assert warnings == []


def test_best_effort_failure_becomes_warning():
    executed = []
    warnings = run_steps('test', [
        Step('flaky', failing('timeout')),
        Step('after', lambda: executed.append('after'), fatal=True),
    ])
    assert executed == ['after']
    assert warnings == ['flaky: timeout']


def test_fatal_failure_aborts_remaining_steps():
    executed = []
    with pytest.raises(DownstreamError, match='^boom$'):
        run_steps('test', [
            Step('fatal', failing('boom'), fatal=True),
            Step('never', lambda: executed.append('never')),
        ])
    assert executed == []


def test_fatal_failure_with_prefix():
    with pytest.raises(DownstreamError, match='^Orders Delete Error: boom$'):
        run_steps('test', [Step('fatal', failing('boom'), fatal=True, error_prefix='Orders Delete Error')])


def test_non_downstream_error_in_fatal_step_is_reraised():
    def broken():
        raise KeyError('id')

    with pytest.raises(KeyError):
        run_steps('test', [Step('broken', broken, fatal=True)])
