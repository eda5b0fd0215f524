# listings/wizard.py
from .draft import DraftStore, completion_percentage
from .exceptions import InvalidField, ValidationFailed
from .services import ListingPublisher
from .steps import FIRST_STEP, StepController
from .validators import VALIDATORS, validate_field


class ValidationState:
    """Errors currently shown to the host and the fields they have touched."""

    def __init__(self, errors=None, touched=None):
        self.errors = dict(errors or {})
        self.touched = set(touched or ())

    def record(self, name, message):
        if message:
            self.errors[name] = message
        else:
            self.errors.pop(name, None)

    def replace(self, errors):
        self.errors = dict(errors)

    def clear(self):
        self.errors = {}
        self.touched = set()


class ListingWizard:
    """
    One host's listing-creation session.

    Owns the draft store, the step controller, the validation state and the
    publisher that commits the finished draft. Touched fields are re-checked
    whenever the draft changes; everything else is validated only when the
    host moves forward or commits.
    """

    def __init__(self, draft_store, steps, publisher, validation=None):
        self.draft_store = draft_store
        self.steps = steps
        self.publisher = publisher
        self.validation = validation or ValidationState()
        draft_store.subscribe(self._on_draft_change)

    @classmethod
    def build(cls, store, state=None, step=FIRST_STEP):
        """Rebuild a wizard from what ``to_state()`` saved earlier."""
        state = state or {}
        draft_store = DraftStore.from_state(state)
        wizard = cls(
            draft_store=draft_store,
            steps=StepController(draft_store, current=step),
            publisher=ListingPublisher(store, draft_store),
            validation=ValidationState(touched=state.get('touched', [])),
        )
        wizard._revalidate_touched()
        return wizard

    def _revalidate_touched(self):
        draft = self.draft_store.snapshot()
        for name in self.validation.touched:
            self.validation.record(name, validate_field(name, getattr(draft, name), draft))

    def _on_draft_change(self, name, value):
        if name is None:
            self._revalidate_touched()
        elif name in self.validation.touched:
            self.validation.record(name, validate_field(name, value, self.draft_store.snapshot()))

    # === Draft editing ===

    def update(self, name, value):
        self.draft_store.set_field(name, value)

    def update_fields(self, changes):
        self.draft_store.set_fields(changes)

    def set_image(self, index, ref):
        self.draft_store.set_image(index, ref)

    def touch(self, name):
        if name not in VALIDATORS:
            raise InvalidField(name)
        self.validation.touched.add(name)
        draft = self.draft_store.snapshot()
        message = validate_field(name, getattr(draft, name), draft)
        self.validation.record(name, message)
        return message

    def undo(self):
        return self.draft_store.undo()

    def reset(self):
        self.draft_store.reset()
        self.steps.current = FIRST_STEP
        self.validation.clear()

    # === Navigation ===

    def advance(self):
        errors = self.steps.advance()
        self.validation.replace(errors)
        return errors

    def retreat(self):
        return self.steps.retreat()

    def jump_to(self, target):
        errors = self.steps.jump_to(target)
        self.validation.replace(errors)
        return errors

    # === Commit ===

    def commit(self):
        try:
            listing = self.publisher.commit(self.draft_store.snapshot())
        except ValidationFailed as exc:
            self.validation.replace(exc.errors)
            raise
        self.steps.current = FIRST_STEP
        self.validation.clear()
        return listing

    # === Persistence / presentation ===

    def to_state(self):
        state = self.draft_store.to_state()
        state['touched'] = sorted(self.validation.touched)
        return state

    def describe(self):
        draft = self.draft_store.snapshot()
        return {
            'step': self.steps.current,
            'step_info': self.steps.info,
            'can_go_next': self.steps.can_go_next,
            'can_go_prev': self.steps.can_go_prev,
            'can_undo': self.draft_store.can_undo,
            'completion': completion_percentage(draft),
            'draft': draft.to_state(),
            'errors': dict(self.validation.errors),
            'touched': sorted(self.validation.touched),
        }
