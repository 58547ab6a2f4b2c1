from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from mvnpub.core.result import Err, Ok, Result
from mvnpub.services.publish.errors import PublishError


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    state: S


@dataclass(frozen=True, slots=True)
class StepFinish[S]:
    state: S


type StepOutcome[S] = StepAdvance[S] | StepFinish[S]
type StepHandler[S] = Callable[[S], Result[StepOutcome[S], PublishError]]
type GetStep[S] = Callable[[S], str]
type OnTransition[S] = Callable[[S, S], None]


def advance[S](state: S) -> StepAdvance[S]:
    return StepAdvance(state=state)


def finish[S](state: S) -> StepFinish[S]:
    return StepFinish(state=state)


def run_state_machine[S](
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S]],
    on_transition: OnTransition[S] | None = None,
) -> Result[S, PublishError]:
    """Run handlers until one finishes; return the final state.

    Each handler either advances to a new state, finishes, or fails. A
    failure stops the machine immediately and is returned unchanged.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(
                PublishError(
                    kind="internal",
                    message=f"no handler for publish state: {step}",
                )
            )

        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome

        nxt = outcome.value.state
        if on_transition is not None:
            on_transition(current, nxt)

        if isinstance(outcome.value, StepFinish):
            return Ok(nxt)
        current = nxt
