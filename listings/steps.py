# listings/steps.py
from .validators import validate_step

FIRST_STEP = 1
LAST_STEP = 3

STEP_INFO = {
    1: {'title': 'Basic Information', 'description': 'Tell us about your place'},
    2: {'title': 'Category', 'description': 'What kind of place are you listing?'},
    3: {'title': 'Review', 'description': 'Check your listing before publishing'},
}


class StepController:
    """Tracks which wizard step the host is on.

    Moving forward is gated on the current step validating; moving back never
    is. Validation problems are returned as a field -> message dict and never
    raised.
    """

    def __init__(self, draft_store, current=FIRST_STEP):
        if current not in STEP_INFO:
            raise ValueError(f"Unknown wizard step: {current}")
        self.draft_store = draft_store
        self.current = current

    def advance(self):
        errors = validate_step(self.current, self.draft_store.snapshot())
        if not errors:
            self.current = min(self.current + 1, LAST_STEP)
        return errors

    def retreat(self):
        self.current = max(self.current - 1, FIRST_STEP)
        return self.current

    def jump_to(self, target):
        if target not in STEP_INFO:
            raise ValueError(f"Unknown wizard step: {target}")
        draft = self.draft_store.snapshot()
        for step in range(FIRST_STEP, target):
            errors = validate_step(step, draft)
            if errors:
                return errors
        self.current = target
        return {}

    @property
    def info(self):
        return STEP_INFO[self.current]

    @property
    def can_go_next(self):
        return self.current < LAST_STEP

    @property
    def can_go_prev(self):
        return self.current > FIRST_STEP
