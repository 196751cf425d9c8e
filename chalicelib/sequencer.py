from typing import Callable, List, Optional

from chalicelib.utils.exceptions import DownstreamError, PartialFailure
from chalicelib.utils.logger import logger, log_exception


class Step:
    """
    One remote call of a sequence.

    A fatal step aborts the sequence when it fails, a best-effort step
    only leaves a warning behind.
    """

    def __init__(self, name: str, action: Callable[[], None], fatal: bool = False,
                 error_prefix: Optional[str] = None):
        self.name = name
        self.action = action
        self.fatal = fatal
        self.error_prefix = error_prefix

    def __repr__(self):
        return f'Step({self.name!r}, fatal={self.fatal})'


def run_steps(operation: str, steps: List[Step]) -> List[str]:
    """
    Runs steps one after another, no retries.
    Re-raises the error of the first failing fatal step,
    returns the list of best-effort failures as warnings.
    """
    warnings = []
    for step in steps:
        logger.info(f'{operation} ::: {step.name}')
        try:
            step.action()
        except Exception as error:
            if step.fatal:
                logger.error(f'{operation} ::: fatal step {step.name} failed, aborting: {error}')
                if step.error_prefix:
                    raise DownstreamError(f'{step.error_prefix}: {error}') from error
                raise
            log_exception(PartialFailure(f'{step.name}: {error}'), msg=f'{operation} ::: best-effort step failed')
            warnings.append(f'{step.name}: {error}')
    logger.info(f'{operation} ::: finished with {len(warnings)} warnings')
    return warnings
