"""Contains results of the repository synchronization workflows."""

from github_repo_manager.synchronize.exceptions import InvalidStateTransitionError, SyncError
from github_repo_manager.synchronize.models import SyncState

CREATE_TRANSITIONS: dict[SyncState, frozenset[SyncState]] = {
    SyncState.IDLE: frozenset({SyncState.REMOTE_CHECKED}),
    SyncState.REMOTE_CHECKED: frozenset({SyncState.REMOTE_CREATED, SyncState.REMOTE_CONFIRMED}),
    SyncState.REMOTE_CREATED: frozenset({SyncState.COMMITTED}),
    SyncState.REMOTE_CONFIRMED: frozenset({SyncState.COMMITTED}),
    SyncState.COMMITTED: frozenset({SyncState.LINKED}),
    SyncState.LINKED: frozenset({SyncState.PUSHED}),
    SyncState.PUSHED: frozenset(),
    SyncState.FAILED: frozenset(),
}
"""Transitions of the create workflow. FAILED is reachable from any non-terminal state."""

UPDATE_TRANSITIONS: dict[SyncState, frozenset[SyncState]] = {
    SyncState.IDLE: frozenset({SyncState.REMOTE_CHECKED}),
    SyncState.REMOTE_CHECKED: frozenset({SyncState.REMOTE_CONFIRMED}),
    SyncState.REMOTE_CREATED: frozenset(),
    # The update workflow links the remote before committing.
    SyncState.REMOTE_CONFIRMED: frozenset({SyncState.LINKED}),
    SyncState.LINKED: frozenset({SyncState.COMMITTED}),
    SyncState.COMMITTED: frozenset({SyncState.PUSHED}),
    SyncState.PUSHED: frozenset(),
    SyncState.FAILED: frozenset(),
}
"""Transitions of the update workflow, which never creates a remote."""

TERMINAL_STATES = frozenset({SyncState.PUSHED, SyncState.FAILED})


class SyncFailure:
    """Contains a single failure recorded during a synchronization workflow."""

    def __init__(self, step: str, error: SyncError) -> None:
        """Initialize the failure from the step name and the raised error."""
        self.step = step
        self.error = error
        self.error_type = type(error).__name__
        self.message = str(error)
        self.fatal = error.fatal
        self.exit_code = error.exit_code

    def __str__(self) -> str:
        """Render the failure for display."""
        return f"{self.step}: {self.error_type}: {self.message}"

    def __repr__(self) -> str:
        """Render the failure for debugging."""
        return f"SyncFailure(step={self.step!r}, error_type={self.error_type!r}, fatal={self.fatal})"


class SyncResult:
    """Contains results of a create or update synchronization workflow."""

    def __init__(self, transitions: dict[SyncState, frozenset[SyncState]] | None = None) -> None:
        """Initialize an empty result in the idle state, guarded by a workflow's transitions (create by default)."""
        self.transitions = transitions if transitions is not None else CREATE_TRANSITIONS
        self.remote_url: str | None = None
        self.created_new: bool = False
        self.commit_made: bool = False
        self.pushed: bool = False
        self.errors: list[SyncFailure] = []
        self.state: SyncState = SyncState.IDLE
        self.history: list[SyncState] = [SyncState.IDLE]

    def advance(self, new_state: SyncState) -> None:
        """Move the state machine to a new state, rejecting illegal transitions."""
        if new_state == SyncState.FAILED:
            if self.state in TERMINAL_STATES:
                raise InvalidStateTransitionError(f"Cannot fail from terminal state {self.state.value}")
        elif new_state not in self.transitions[self.state]:
            raise InvalidStateTransitionError(f"Illegal transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def record_failure(self, step: str, error: SyncError) -> SyncFailure:
        """Record a failure. Fatal failures move the state machine to FAILED."""
        failure = SyncFailure(step, error)
        self.errors.append(failure)
        if failure.fatal:
            self.advance(SyncState.FAILED)
        return failure

    @property
    def fatal_errors(self) -> list[SyncFailure]:
        """Return the failures that aborted the workflow."""
        return [failure for failure in self.errors if failure.fatal]

    @property
    def succeeded(self) -> bool:
        """Return True if the workflow pushed without any fatal failure."""
        return self.pushed and not self.fatal_errors

    @property
    def exit_code(self) -> int:
        """Return the process exit code for this result (non-fatal failures do not count)."""
        fatal_errors = self.fatal_errors
        if fatal_errors:
            return fatal_errors[0].exit_code
        return 0
